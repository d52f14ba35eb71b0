"""
Setup script for asset-metadata-registry
"""

from setuptools import setup, find_packages

setup(
    name="asset-metadata-registry",
    version="1.0.0",
    description="Client for metadata field definitions and datasources of an asset-management service",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "httpx>=0.25",
        "backoff>=2.2",
        "prometheus-client>=0.17",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.21",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    zip_safe=False,
)
