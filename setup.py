#!/usr/bin/env python3
"""
Package definition for the CDDA track splitter.

Install for development with: pip install -e ".[test]"
"""

from setuptools import setup, find_packages

setup(
    name="cdda-splitter",
    version="0.1.0",
    description="Split raw CDDA disc images with subchannel data into per-track WAV files",
    license="MIT",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.5.0",
        "rich>=13.7.0",
        "numpy>=1.26.0",
    ],
    extras_require={
        "test": ["pytest>=7.4.0"],
    },
    entry_points={
        "console_scripts": [
            "cdda-split=cdda_splitter.main:main",
        ],
    },
)
