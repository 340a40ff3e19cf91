"""Nino Language Server package.

This package provides:
- A pygls-based Language Server for the Nino expression language.
- A static indexer that tokenizes and parses documents without evaluating them.
"""

__all__ = [
    "server",
    "indexer",
]
