"""
Setup script for the VEER backend services (system agent, functions, CLI).
"""
from setuptools import setup, find_packages

setup(
    name="veer-services",
    version="0.1.0",
    packages=find_packages(include=["veer", "veer.*"]),
    install_requires=[
        "click>=8.1.0",
        "httpx>=0.25.0",
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "psutil>=5.9.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "veer=veer.__main__:main",
            "veer-cli=veer.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
