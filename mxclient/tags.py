"""Room tag content."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class TagProperties:
    """Properties of a single room tag."""

    order: float = 0.0

    def to_dict(self) -> dict:
        return {"order": self.order} if self.order else {}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "TagProperties":
        data = data or {}
        return cls(order=float(data.get("order") or 0.0))


@dataclass
class TagContent:
    """Content of an ``m.tag`` event."""

    tags: dict[str, TagProperties] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"tags": {name: props.to_dict() for name, props in self.tags.items()}}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "TagContent":
        data = data or {}
        tags = data.get("tags") or {}
        return cls(
            tags={name: TagProperties.from_dict(props) for name, props in tags.items()}
        )