# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="qdir",
    version="1.1.0",
    description="Fast, recursive queueing of files from a directory tree to Redis",
    author="qdir contributors",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["qdir", "qdir.*"]),
    python_requires=">=3.8",
    install_requires=[
        "redis>=4.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'qdir=qdir.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
    ],
)
