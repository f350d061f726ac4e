"""
TraceChain Framework: a supply chain traceability ledger

TraceChain records products, the participants that handle them and a
time-ordered trace of custody/inspection events per product, and answers
provenance and authenticity queries over that history.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh.readlines() if line.strip() and not line.startswith("#")]

# Get version from the package
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '.'))
from tracechain.units.version import get_version, VERSION

setup(
    name="TraceChain",
    version=get_version(VERSION),
    author="Nguyễn Lê Văn Dũng",
    description="An in-memory supply chain traceability ledger with a REST API and CLI",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=['tracechain', 'tracechain.*'], exclude=['tests*']),
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-benchmark>=4.0",
            "hypothesis>=6.100",
        ],
    },
    entry_points={
        "console_scripts": [
            "trc=tracechain.cli:trc",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Application Frameworks",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    keywords="supply chain, traceability, provenance, ledger",
)
