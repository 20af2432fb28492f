from setuptools import setup, find_packages

setup(
    name="forge-extract",
    version="0.1.0",
    description="Compile a Foundry contract and export its ABI and bytecode",
    packages=find_packages(include=["forge_extract", "forge_extract.*"]),
    install_requires=[
        "pyyaml>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "forge-extract=forge_extract.main:run",
        ],
    },
)
