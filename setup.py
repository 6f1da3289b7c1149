"""
setup.py

Packaging metadata and CLI entry point for the supplement claims validator.

Version: 1.0.0. Validates claim records against JSON schemas, controlled
vocabularies and filename conventions, and verifies cited DOIs in batches.
"""
from setuptools import setup, find_packages

setup(
    name="supplement-claims",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click",
        "pydantic>=2.0",
        "PyYAML",
        "jsonschema>=4.0",
        "requests",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
        ],
    },
    entry_points={
        "console_scripts": [
            "claims=cli:cli",
        ],
    },
    python_requires=">=3.8",
)
