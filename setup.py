# setup.py
from setuptools import setup, find_packages

setup(
    name="nino",
    version="0.3.0",
    description="Interpreter for the Nino expression language",
    packages=find_packages(include=["nino", "nino.*", "nino_lsp", "nino_lsp.*"]),
    python_requires=">=3.10",
    install_requires=[
        "typer>=0.9",
        "termcolor>=2.1",
        "pygls>=1.0,<2",
        "lsprotocol",
    ],
    extras_require={
        "test": ["pytest>=7", "hypothesis>=6"],
    },
    entry_points={
        "console_scripts": [
            "nino=nino.cli:main",
            "nino-ls=nino_lsp.server:main",
        ],
    },
    zip_safe=False,
)
