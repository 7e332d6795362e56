"""Single-wildcard filename patterns such as ``settings-*.json``.

Only one ``*`` is supported. It matches zero or more characters and every
other character is literal, so matching is a prefix/suffix test rather than
a glob engine.
"""

from typing import List


class FilePattern:
    """A filename pattern split into the literal text around its wildcard."""

    def __init__(self, pattern: str):
        if pattern.count("*") != 1:
            raise ValueError(f"pattern must contain exactly one '*': {pattern!r}")
        self.pattern = pattern
        self.prefix, self.suffix = pattern.split("*")

    def __repr__(self) -> str:
        return f"FilePattern({self.pattern!r})"

    def matches(self, filename: str) -> bool:
        if len(filename) < len(self.prefix) + len(self.suffix):
            return False
        return filename.startswith(self.prefix) and filename.endswith(self.suffix)

    def alias_candidates(self, alias: str) -> List[str]:
        """Filenames an alias may refer to, most specific first.

        >>> FilePattern("settings-*.json").alias_candidates("work")
        ['settings-work.json', 'settings-work', 'work.json', 'work']
        """
        candidates = [
            f"{self.prefix}{alias}{self.suffix}",
            f"{self.prefix}{alias}",
            f"{alias}{self.suffix}",
            alias,
        ]
        # Empty prefix or suffix produces repeats
        return list(dict.fromkeys(candidates))

    def alias_for(self, filename: str) -> str:
        """Inverse of the first candidate: ``settings-work.json`` -> ``work``."""
        if not self.matches(filename):
            return filename
        end = len(filename) - len(self.suffix)
        return filename[len(self.prefix):end]
