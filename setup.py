"""
sqleary Setup
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="sqleary",
    version="1.0.0",
    description="Build, run and paginate SQL queries from JSON-like query objects",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["sqleary", "sqleary.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Database",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "sqlglot>=20.0",
        "httpx>=0.25.0",
    ],
    extras_require={
        "duckdb": ["duckdb>=0.9.0"],
        "test": ["pytest>=7.0", "pytest-asyncio>=0.21", "duckdb>=0.9.0"],
        "all": ["duckdb>=0.9.0"],
    },
    keywords="sql, query builder, pagination, sqlite",
)
