"""Log Position — (file, offset) marker into a binary log stream.

Invariants:
    - Total order: file compared lexicographically first, offset numerically
      only when files are exactly equal
    - No numeric extraction from file names — callers must supply names that
      sort in rotation order (zero-padded suffixes, e.g. mysql-bin.000042)
    - An empty file name means "no position" (see NodeSnapshot.is_replica)

Design Decisions:
    - frozen + order=True dataclass: field order (file, offset) IS the total order,
      so the generated comparisons match is_smaller_than exactly
"""

from dataclasses import dataclass

from repltopo.core.domain_types import LogOffset


@dataclass(frozen=True, order=True)
class LogPosition:
    """Position of an event inside the binary log."""

    file: str = ""
    offset: LogOffset = LogOffset(0)

    def __str__(self) -> str:
        return f"{self.file}:{self.offset}"

    def is_smaller_than(self, other: "LogPosition") -> bool:
        if self.file < other.file:
            return True
        return self.file == other.file and self.offset < other.offset
