"""Content site configuration and result normalization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from vodhub.cache.base import ResultItem


@dataclass(frozen=True)
class SourceConfig:
    """A content-listing site registered in the site registry."""

    key: str
    name: str
    api: str
    active: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SourceConfig:
        """Build from a registry record."""
        return cls(
            key=str(data["key"]),
            name=str(data.get("name") or data["key"]),
            api=str(data["api"]),
            active=bool(data.get("active", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "name": self.name, "api": self.api, "active": self.active}


def stamp_items(items: list[Any], source: SourceConfig) -> list[ResultItem]:
    """Tag each upstream item with the site it came from.

    The provenance fields always win over same-named upstream fields.
    Non-object entries are dropped.
    """
    return [
        {**item, "site_key": source.key, "site_name": source.name}
        for item in items
        if isinstance(item, dict)
    ]
