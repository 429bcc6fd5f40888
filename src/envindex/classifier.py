"""Keyword recognition of free-text component and category names.

Measurement stores label the same indicator in many ways ("Гумус",
"Вміст гумусу, %", "humus"), so every scorer maps names onto its own
indicator keys with the same two steps:

1. exact lookup of the lowercased name among the known keys;
2. substring scan of an ordered keyword table, first entry wins.

Tables are ordered lists of ``(key, keywords)`` pairs; the order is part of
the behaviour and must not be sorted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Tuple

KeywordTable = Sequence[Tuple[str, Sequence[str]]]


def contains_any(text: Optional[str], keywords: Iterable[str]) -> bool:
    if not text:
        return False
    lowered = text.lower()
    return any(k in lowered for k in keywords)


@dataclass(frozen=True)
class KeywordClassifier:
    table: KeywordTable
    known_keys: Tuple[str, ...] = field(default=())

    def match(self, name: Optional[str]) -> Optional[str]:
        if not name:
            return None
        lowered = name.lower()
        if lowered in self.known_keys:
            return lowered
        for key, keywords in self.table:
            if any(k in lowered for k in keywords):
                return key
        return None

    def matches_any(self, name: Optional[str]) -> bool:
        return any(contains_any(name, keywords) for _, keywords in self.table)
