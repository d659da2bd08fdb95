"""Shared dataclasses for extracted commits and contribution counts."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any


def to_json(data: Any, indent: int = 2) -> str:
    if isinstance(data, list):
        serializable = [asdict(item) if hasattr(item, "__dataclass_fields__") else item for item in data]
    elif hasattr(data, "__dataclass_fields__"):
        serializable = asdict(data)
    else:
        serializable = data
    return json.dumps(serializable, indent=indent)


@dataclass(frozen=True)
class CommitRecord:
    hash: str
    author: str
    message: str
    parent_link: str | None  # None only when stop_at_root hit the first commit
    url: str  # page the record was extracted from


@dataclass
class Contribution:
    created: int = 0
    reviewed: int = 0


@dataclass
class ContributorStats:
    contributor: str
    created: int
    reviewed: int
