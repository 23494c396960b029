"""
Module: library

Purpose:
    In-memory method catalog queries (title lookup with suggestions).
    Catalog ingestion and storage live outside this package.

Key Classes:
    - MethodLib: Stage -> title index of CompactMethods
    - CompactMethod: Unparsed stored method
    - QueryResult / QueryStatus: Lookup outcomes
"""

from .method_lib import CompactMethod, MethodLib, QueryResult, QueryStatus

__all__ = [
    "CompactMethod",
    "MethodLib",
    "QueryResult",
    "QueryStatus",
]
