"""
Search Metrics - Named statistics from one search call.

Stores key -> string pairs. Depth lines are keyed by the depth number
("1", "2", ...); totals use EXPANDED_NODES and MAX_DEPTH.
"""

from __future__ import annotations
from dataclasses import dataclass, field


EXPANDED_NODES = "expanded_nodes"
MAX_DEPTH = "max_depth"


@dataclass
class SearchMetrics:
    """Key/value record for efficiency analysis and display."""
    values: dict[str, str] = field(default_factory=dict)

    def set(self, name: str, value: object) -> None:
        self.values[name] = str(value)

    def get(self, name: str) -> str | None:
        return self.values.get(name)

    def get_int(self, name: str) -> int:
        return int(self.values[name])

    def get_float(self, name: str) -> float:
        return float(self.values[name])

    def keys(self) -> list[str]:
        return list(self.values)

    def depth_lines(self) -> dict[int, str]:
        """Per-depth log lines, ordered by depth."""
        lines = {int(k): v for k, v in self.values.items() if k.isdigit()}
        return dict(sorted(lines.items()))

    @property
    def expanded_nodes(self) -> int:
        return self.get_int(EXPANDED_NODES) if EXPANDED_NODES in self.values else 0

    @property
    def max_depth(self) -> int:
        return self.get_int(MAX_DEPTH) if MAX_DEPTH in self.values else 0

    def __str__(self) -> str:
        return str(self.values)
