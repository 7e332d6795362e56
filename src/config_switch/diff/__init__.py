"""Diff layer: structural comparison of configuration documents."""

from ..models import DiffResult, DiffSummary, ValueChange
from .engine import compare, diff_documents, values_equal

__all__ = [
    "DiffResult",
    "DiffSummary",
    "ValueChange",
    "compare",
    "diff_documents",
    "values_equal",
]
