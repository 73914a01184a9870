from __future__ import annotations

import pytest

from core.errors import NetworkError
from core.manager import DirectoryManager
from storage import ChannelCache, Storage

SAMPLE_URL = "http://example.test/IPTV.txt"
SAMPLE_TEXT = "CNN,http://a/cnn.m3u8\nBBC,http://b/bbc.m3u8\n\ninvalid-line\n"


class FakeFetcher:
    """Remplace le GET réseau : renvoie un corps fixe ou lève l'erreur donnée."""

    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[str] = []

    def __call__(self, url: str) -> str:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def storage(tmp_path):
    return Storage(tmp_path / "data" / "iptv.db")


@pytest.fixture
def cache(storage):
    return ChannelCache(storage)


@pytest.fixture
def fetcher():
    return FakeFetcher(SAMPLE_TEXT)


@pytest.fixture
def unreachable():
    return FakeFetcher(error=NetworkError("Failed to establish a new connection"))


@pytest.fixture
def manager(cache, fetcher):
    return DirectoryManager(cache, default_url=SAMPLE_URL, fetcher=fetcher)
