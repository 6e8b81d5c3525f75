"""
Setup script for the Kazi Mashinani dashboard.

Allows development installation with `pip install -e .`
Test tooling: `pip install -e .[test]`
"""

from setuptools import setup, find_packages

setup(
    name="kazi-mashinani",
    version="1.0.0",
    packages=find_packages(include=["kazi", "kazi.*", "frontend", "frontend.*"]),
    py_modules=["version"],
    package_data={"frontend": ["templates/*.html"]},
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "flask>=3.0",
        "requests>=2.31",
        "python-dotenv>=1.0",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-mock>=3.12",
        ],
    },
)
