#!/usr/bin/env python3
"""
htcp-purge - Setup Script

For development installation:
    pip install -e .[dev]
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read version from package
version = "0.1.0"

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text() if readme_path.exists() else ""

setup(
    name="htcp-purge",
    version=version,
    description="HTCP CLR cache purger for reverse-proxy cache fleets",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="htcp-purge contributors",
    license="Open Source",

    packages=find_packages(include=["htcpurge", "htcpurge.*", "purgectl"]),
    python_requires=">=3.11",

    install_requires=[
        "toml>=0.10",
    ],

    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "pytest-cov>=3.0",
            "black>=22.0",
            "mypy>=0.9",
        ],
    },

    entry_points={
        "console_scripts": [
            "purgectl=purgectl.main:main",
        ],
    },

    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: System Administrators",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: Proxy Servers",
        "Topic :: System :: Networking",
    ],

    keywords="htcp cache purge varnish squid udp",
)
