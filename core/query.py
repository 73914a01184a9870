from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List
from urllib.parse import urlparse

from .errors import InvalidURLError

if TYPE_CHECKING:
    from .models import Channel

# Vue filtrée de l'annuaire (barre de recherche) et sélection d'un flux à lire.


def filter_channels(channels: Iterable["Channel"], search_text: str) -> List["Channel"]:
    """
    Sous-chaîne insensible à la casse sur le nom uniquement.
    Terme vide -> annuaire complet, ordre d'origine conservé, aucun score.
    """
    items = list(channels)
    if not search_text:
        return items
    q = search_text.casefold()
    return [ch for ch in items if q in ch.name.casefold()]


def playable_url(channel: "Channel") -> str:
    """URL à passer au lecteur ; lève InvalidURLError si elle n'est pas absolue."""
    url = (channel.url or "").strip()
    p = urlparse(url)
    if not p.scheme or not p.netloc or any(c.isspace() for c in url):
        raise InvalidURLError("invalid video URL")
    return url
