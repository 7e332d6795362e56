"""Diff engine: structural comparison of two configuration documents.

At each mapping level the key sets are compared: keys only in B are added,
keys only in A are removed. Keys present in both are recursed into when both
values are mappings; any other pair is compared by strict deep equality and
recorded as changed when unequal. Arrays are atomic: an unequal array is one
changed value, never an element-wise diff.
"""

from pathlib import Path
from typing import Any, Dict

from ..file_ops import read_json
from ..logging_config import get_logger
from ..models import DiffResult, ValueChange

logger = get_logger(__name__)


def values_equal(a: Any, b: Any) -> bool:
    """JSON value equality: ``True`` never equals ``1``, ``1`` equals ``1.0``."""
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, dict) and isinstance(b, dict):
        if a.keys() != b.keys():
            return False
        return all(values_equal(a[k], b[k]) for k in a)
    if isinstance(a, list) and isinstance(b, list):
        if len(a) != len(b):
            return False
        return all(values_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, (dict, list)) or isinstance(b, (dict, list)):
        return False
    return a == b


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


def _diff_level(
    a: Dict[str, Any],
    b: Dict[str, Any],
    prefix: str,
    result: DiffResult,
) -> None:
    for key in b:
        if key not in a:
            result.added[_join(prefix, key)] = b[key]

    for key in a:
        if key not in b:
            result.removed[_join(prefix, key)] = a[key]

    for key in a:
        if key not in b:
            continue
        old, new = a[key], b[key]
        path = _join(prefix, key)
        if isinstance(old, dict) and isinstance(new, dict):
            _diff_level(old, new, path, result)
        elif not values_equal(old, new):
            result.changed[path] = ValueChange(from_value=old, to_value=new)


def diff_documents(a: Any, b: Any) -> DiffResult:
    """Compare two already-parsed documents.

    Non-mapping roots are compared as a single value under the empty path.
    """
    result = DiffResult()
    if isinstance(a, dict) and isinstance(b, dict):
        _diff_level(a, b, "", result)
    elif not values_equal(a, b):
        result.changed[""] = ValueChange(from_value=a, to_value=b)
    return result


def compare(path_a: Path, path_b: Path) -> DiffResult:
    """Read two JSON files and diff them.

    Args:
        path_a: Baseline document
        path_b: Document compared against the baseline

    Raises:
        FileAccessError: If either file cannot be read
        DocumentFormatError: If either file is not valid JSON
    """
    a = read_json(Path(path_a))
    b = read_json(Path(path_b))

    result = diff_documents(a, b)
    summary = result.summary
    logger.debug(
        f"Compared {path_a} -> {path_b}: "
        f"+{summary.added} -{summary.removed} ~{summary.changed}"
    )
    return result
