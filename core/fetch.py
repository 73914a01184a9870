from __future__ import annotations

from urllib.parse import urlparse

import requests

from .errors import DecodeError, NetworkError

# Téléchargement de l'annuaire : un seul GET, corps lu en UTF-8 quel que soit le content-type.


def is_valid_url(url: str) -> bool:
    """URL absolue syntaxiquement correcte (schéma + hôte, sans espaces)."""
    if not isinstance(url, str) or not url or any(c.isspace() for c in url):
        return False
    try:
        p = urlparse(url)
        # .port lève ValueError si le port n'est pas numérique / hors plage
        _ = p.port
    except ValueError:
        return False
    return bool(p.scheme and p.netloc and p.hostname)


def fetch_directory_text(url: str, timeout: float | None = None, session: requests.Session | None = None) -> str:
    """
    GET sans en-têtes ni auth. timeout=None garde le défaut du transport.
    Lève NetworkError (transport ou statut non 2xx) ou DecodeError (corps non UTF-8).
    """
    getter = session.get if session is not None else requests.get
    try:
        r = getter(url, timeout=timeout)
        r.raise_for_status()
        if not 200 <= r.status_code < 300:
            # 1xx/3xx non suivis par requests : pas un corps d'annuaire
            raise NetworkError(f"HTTP {r.status_code}")
        data = r.content
    except requests.exceptions.RequestException as e:
        raise NetworkError(str(e) or type(e).__name__) from e

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError() from e
