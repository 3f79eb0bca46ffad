"""Resilient Language Server package.

This package provides:
- A pygls-based Language Server for the Resilient language.
- A static indexer that lexes, parses and type-checks a buffer without evaluation.

Note: The LSP never evaluates user buffers; live blocks could re-run side effects.
"""

__all__ = [
    "server",
    "indexer",
]
