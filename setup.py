#!/usr/bin/env python

from setuptools import setup, find_packages

setup(
    name="minissdpc",
    version="1.0.0",
    description="Client for the minissdpd SSDP daemon over its Unix socket",
    packages=find_packages("src", include=["minissdpc", "minissdpc.*"]),
    package_dir={"": "src"},
    package_data={"": ["py.typed"]},
    python_requires=">=3.10",
    install_requires=("rich",),
    extras_require={
        "test": (
            "pytest",
            "pytest-timeout",
            "hypothesis",
        ),
    },
    entry_points={
        "console_scripts": ["minissdpc=minissdpc.cli:main"],
    },
)
