# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="filelogger",
    version="0.1.0",
    description="Rotation-aware, multi-process safe file logging engine",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["filelogger", "filelogger.*"]),
    python_requires=">=3.9",
    install_requires=[
        "portalocker>=2.7",  # Advisory locks on the open log file
        "watchdog>=3.0",  # External delete/rename notifications
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
