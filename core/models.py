from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from .query import filter_channels

# Structures de données partagées entre manager, cache, workers et UI.


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Channel:
    """Une entrée de l'annuaire : nom affiché + URL de flux (non validée au parsing)."""
    name: str
    url: str
    # Regénéré à chaque parsing ; le cache le conserve tel quel.
    id: str = field(default_factory=_new_id)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "url": self.url}

    @classmethod
    def from_dict(cls, data) -> "Channel":
        if not isinstance(data, dict):
            raise ValueError(f"channel payload must be an object, got {type(data).__name__}")
        name = data.get("name")
        url = data.get("url")
        if not isinstance(name, str) or not isinstance(url, str):
            raise ValueError("channel payload needs string 'name' and 'url'")
        cid = data.get("id")
        if isinstance(cid, str) and cid:
            return cls(name=name, url=url, id=cid)
        return cls(name=name, url=url)


@dataclass(frozen=True)
class DirectoryState:
    """Instantané publié aux observateurs (UI). Les chaînes restent celles du dernier succès."""
    channels: tuple[Channel, ...] = ()
    is_loading: bool = False
    error_message: str | None = None
    search_text: str = ""

    @property
    def filtered_channels(self) -> list[Channel]:
        return filter_channels(self.channels, self.search_text)

    @property
    def channel_count(self) -> int:
        return len(self.channels)
