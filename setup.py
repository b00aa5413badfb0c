#!/usr/bin/env python3
"""
Setup script for webapp-publisher.
"""

import codecs
import os
import re
from setuptools import setup, find_packages


def read(rel_path):
    """Read file content."""
    here = os.path.abspath(os.path.dirname(__file__))
    with codecs.open(os.path.join(here, rel_path), 'r', 'utf-8') as fp:
        return fp.read()


def find_version(rel_path):
    """Extract version from __version__.py file."""
    init_content = read(rel_path)
    version_match = re.search(
        r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
        init_content,
        re.MULTILINE
    )
    if version_match:
        return version_match.group(1)
    raise RuntimeError("Unable to find version string.")


if __name__ == "__main__":
    setup(
        name="webapp-publisher",
        version=find_version("webapp_publisher/__version__.py"),
        description="Publish a static site directory to an Azure Web App",
        author="vistart",
        author_email="i@vistart.me",
        license="MIT",
        packages=find_packages(exclude=["tests*", "docs*", "examples*", "scripts*"]),
        python_requires=">=3.8",
        install_requires=[
            "azure-core>=1.26",
            "azure-identity>=1.12",
            "azure-mgmt-resource>=23.0,<24",
            "azure-mgmt-web>=7.0",
            "aiohttp>=3.8",
            "aiofiles>=23.1",
            "click>=8.0",
            "rich>=13.0",
            "PyYAML>=6.0",
        ],
        extras_require={
            "test": [
                "pytest>=7.0",
                "pytest-asyncio>=0.21",
            ],
        },
        entry_points={
            "console_scripts": [
                "webapp-publisher=webapp_publisher.cli.main:main",
            ],
        },
    )
