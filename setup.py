from setuptools import setup, find_packages

setup(
    name="column-impact",
    version="0.1.0",
    description="Traces which Java classes and endpoints are affected by renaming or removing a database column",
    author="Innovation Week Team",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "tree-sitter>=0.23.0",
        "tree-sitter-java>=0.23.0",
        "networkx>=3.1",
        "click>=8.1.7",
        "rich>=13.7.0",
        "openpyxl>=3.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "column-impact=column_impact.cli:cli",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
