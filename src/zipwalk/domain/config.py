from __future__ import annotations

"""
Walk Configuration.

Immutable options that tune how far and how loudly the walker descends
into archives. The package keeps no persisted configuration; callers
build a WalkOptions directly or through the CLI flag mapping.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class WalkOptions:
    """
    Behavioural switches for 'zipwalk.walk'.

    Attributes:
        descend_archives: Decode archives and visit their members. When
                          False archives are visited as plain files.
        report_anomalies: Also deliver skipped-node problems to the visitor
                          through its 'err' argument. They are always logged.
        max_depth: Maximum archive nesting depth to decode. 1 means only
                   archives found on the real filesystem. None is unbounded.
    """
    descend_archives: bool = True
    report_anomalies: bool = False
    max_depth: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_depth is not None and self.max_depth < 1:
            raise ValueError(f"max_depth must be a positive integer, got {self.max_depth}")

    def allows_depth(self, depth: int) -> bool:
        """Check whether an archive at the given nesting depth may be decoded."""
        return self.max_depth is None or depth <= self.max_depth


DEFAULT_OPTIONS = WalkOptions()
