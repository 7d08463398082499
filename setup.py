"""
pothosgen - Pothos GraphQL generator for Prisma
Install: pip install -e .
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="pothosgen",
    version="0.1.0",
    author="Diegoproggramer",
    author_email="",
    description="Generate Pothos GraphQL types and CRUD resolvers from a Prisma schema",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/Diegoproggramer/pothosgen",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Code Generators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pothosgen=pothosgen.cli:cli_main",
        ],
    },
    keywords="prisma, pothos, graphql, generator, code-generator, crud, typescript",
    project_urls={
        "Bug Reports": "https://github.com/Diegoproggramer/pothosgen/issues",
        "Source": "https://github.com/Diegoproggramer/pothosgen",
    },
)
