#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
panbin: path binning for pangenome variation graphs

Summarizes the paths of a GFA variation graph on a linear grid of bins:
per-bin coverage, inversion and position statistics plus bin-to-bin links,
written as TSV or newline-delimited JSON.

Version: 0.1
License: Dual Academic/Commercial
"""

from setuptools import setup, find_packages
import os
import sys

# Ensure we can import version
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "panbin"))

from version import __version__

# Read long description from README
with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

# Read requirements from requirements.txt
def read_requirements(filename):
    """Read requirements from file."""
    filepath = os.path.join(os.path.dirname(__file__), filename)
    if not os.path.exists(filepath):
        return []
    with open(filepath, "r") as f:
        return [line.strip() for line in f if line.strip() and not line.startswith("#")]

# Basic requirements (always installed)
install_requires = read_requirements("requirements.txt")

# Optional dependencies
extras_require = {
    "dev": read_requirements("requirements-dev.txt"),
}

extras_require["test"] = extras_require["dev"]
extras_require["all"] = extras_require.get("dev", [])

setup(
    name="panbin",
    version=__version__,
    author="panbin Development Team",
    description="Path binning for pangenome variation graphs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "License :: Other/Proprietary License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "panbin=panbin.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
    keywords="pangenome variation graph gfa binning bioinformatics",
)
