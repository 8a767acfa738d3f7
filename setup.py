"""
Setup script for pdfrenderx.

This script configures the package for installation via pip.
Supports both development and production installations.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the README for long description
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding='utf-8')

setup(
    name="pdfrenderx",
    version="1.0.0",
    description="Print HTML documents to PDF with headless Chromium, one page at a time for large books",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="pdfrenderx Contributors",
    author_email="",
    packages=find_packages(include=["pdfrenderx", "pdfrenderx.*"]),
    install_requires=[
        "playwright>=1.40.0",
        "pypdf>=3.9.0",
        "click>=8.0.0",
        "rich>=13.0.0",
        "psutil>=5.9.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pdfrenderx=pdfrenderx.cli:cli",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Printing",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="pdf html print chromium playwright ghostscript merge pages",
    license="MIT",
    include_package_data=True,
    zip_safe=False,
)
