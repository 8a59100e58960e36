"""
Id generation for cards, tiles and links.

Each game owns its own generator, so two games created in the same
process never hand out colliding ids.
"""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class IdGenerator:
    """Monotonic per-prefix counters: next_id("card") -> "card-0", "card-1", ..."""
    counters: dict[str, int] = field(default_factory=dict)

    def next_id(self, prefix: str) -> str:
        value = self.counters.get(prefix, 0)
        self.counters[prefix] = value + 1
        return f"{prefix}-{value}"
