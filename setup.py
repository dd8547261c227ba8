from setuptools import setup, find_packages
from pathlib import Path
import sys

# Check Python version requirement
if sys.version_info < (3, 10):
    raise RuntimeError("SftpPy requires Python 3.10 or newer")

setup(
    name="SftpPy",
    version="1.0.0",
    author="Andrew Hernandez",
    author_email="andromedeyz@hotmail.com",
    description="A directory-aware SFTP client for Python with recursive upload, download and delete, in blocking and async flavours.",
    long_description=(
        open("README.md", "r", encoding="utf-8").read()
        if Path("README.md").exists()
        else "SftpPy takes the pain out of moving whole directory trees over SFTP. Push a folder up, pull one down, or wipe one out, with a callback for every file and a blocking or asyncio API - all with clean, simple Python code."
    ),
    long_description_content_type="text/markdown",
    url="http://github.com/ApaxPhoenix/SftpPy",
    project_urls={
        "Bug Tracker": "http://github.com/ApaxPhoenix/SftpPy/issues",
        "Source Code": "http://github.com/ApaxPhoenix/SftpPy",
    },
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: File Transfer Protocol (FTP)",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: System :: Networking",
    ],
    python_requires=">=3.10",
    install_requires=[
        "paramiko>=3.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    keywords="sftp, ssh, async, file transfer, directory sync, upload, download",
    license="MIT",
    zip_safe=False,  # Set to False for packages with data files or C extensions
    include_package_data=True,  # Include files specified in MANIFEST.in
)
