#!/usr/bin/env python3
"""
echoping v1.0.0 - Setup Configuration
=====================================

ICMP Echo (ping) client with round-trip statistics.

Installation:
    pip install .

    OR (development mode):
    pip install -e .[dev]

    Creates 'echoping' console script globally.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read long description from README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

# Core dependencies
REQUIRED_PACKAGES = [
    "jsonschema>=4.0.0",    # Configuration validation
    "colorama>=0.4.6",      # Cross-platform colored output
]

# Optional development dependencies
EXTRAS_REQUIRE = {
    "dev": [
        "pytest>=7.0.0",    # Testing
        "pytest-cov>=4.0.0", # Coverage reporting
        "scapy>=2.4.5",     # Reference packets in tests
        "black>=22.0.0",    # Code formatting
        "pylint>=2.14.0",   # Linting
        "mypy>=0.950",      # Type checking
    ],
}

setup(
    # Package Information
    name="echoping",
    version="1.0.0",
    description="ICMP Echo (ping) client with round-trip statistics",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # Classification
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Environment :: Console",
        "Intended Audience :: System Administrators",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet",
        "Topic :: System :: Networking",
        "Topic :: System :: Networking :: Monitoring",
    ],

    # Keywords for searching
    keywords=[
        "network",
        "ping",
        "icmp",
        "echo",
        "latency",
        "raw-socket",
    ],

    # Package Configuration
    packages=find_packages(exclude=["tests", "tests.*"]),

    # Python Version Requirement
    python_requires=">=3.8",

    # Dependencies
    install_requires=REQUIRED_PACKAGES,
    extras_require=EXTRAS_REQUIRE,

    # Entry Points (Console Scripts)
    entry_points={
        "console_scripts": [
            "echoping=echoping.cli:main",
        ],
    },

    zip_safe=False,
)
