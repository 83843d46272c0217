# setup.py
"""Setup script for the Recorder Ingest Tool."""

import os

from setuptools import setup, find_packages

setup(
    name="recorder-ingest-tool",
    version="1.0.0",
    description="Transfer, reassemble and convert split voice recorder files",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Recorder Ingest Team",
    packages=find_packages(include=["ingest_tool", "ingest_tool.*"]),
    python_requires=">=3.8",
    install_requires=[
        "pydub>=0.25.1",
        "mutagen>=1.45.0",
        "tqdm>=4.50.0",
        "audioop-lts>=0.2.1; python_version>='3.13'",
    ],
    extras_require={
        "test": [
            "pytest>=6.0.0",
            "pytest-cov>=2.10.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ingest-tool=ingest_tool.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Multimedia :: Sound/Audio :: Conversion",
        "Topic :: System :: Archiving",
    ],
)
