"""Kalenuxer setup - incremental static-site builds."""
from setuptools import setup, find_packages

setup(
    name="kalenuxer",
    version="1.0.0",
    description="Kalenuxer: incremental static-site build pipeline",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "kalenuxer=kalenuxer_cli.main:cli",
        ],
    },
)
