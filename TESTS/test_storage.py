from __future__ import annotations

import sqlite3

from core.models import Channel
from storage import CHANNELS_KEY, ChannelCache


def test_load_empty_is_none(cache):
    assert cache.load() is None


def test_round_trip_keeps_ids(cache):
    directory = [Channel("CNN", "http://a/cnn.m3u8"), Channel("Télé Québec", "http://tq")]
    cache.load()
    cache.save(directory)
    assert cache.load() == directory


def test_empty_directory_round_trip(cache):
    cache.save([Channel("Old", "http://old")])
    cache.save([])
    assert cache.load() == []


def test_clear(cache):
    cache.save([Channel("CNN", "http://a")])
    cache.clear()
    assert cache.load() is None
    cache.clear()


def test_corrupted_blob_is_ignored(storage):
    lines = []
    cache = ChannelCache(storage, log=lambda s, level="INFO": lines.append((level, s)))
    storage.set_value(CHANNELS_KEY, "{not json")
    assert cache.load() is None
    storage.set_value(CHANNELS_KEY, '{"name": "x"}')
    assert cache.load() is None
    storage.set_value(CHANNELS_KEY, '[{"name": 1, "url": "x"}]')
    assert cache.load() is None
    assert all(level == "WARN" for level, _ in lines) and len(lines) == 3


def test_payload_without_id_gets_one(storage, cache):
    storage.set_value(CHANNELS_KEY, '[{"name": "A", "url": "http://a"}]')
    loaded = cache.load()
    assert [(c.name, c.url) for c in loaded] == [("A", "http://a")]
    assert loaded[0].id


class BrokenStorage:
    def get_value(self, key):
        raise sqlite3.OperationalError("disk I/O error")

    def set_value(self, key, value):
        raise sqlite3.OperationalError("database is locked")

    def delete_value(self, key):
        raise sqlite3.OperationalError("database is locked")


def test_storage_errors_are_swallowed():
    cache = ChannelCache(BrokenStorage())
    cache.save([Channel("A", "http://a")])
    assert cache.load() is None
    cache.clear()


def test_single_slot_last_write_wins(storage):
    a = ChannelCache(storage)
    b = ChannelCache(storage)
    a.save([Channel("A", "http://a")])
    b.save([Channel("B", "http://b")])
    assert [c.name for c in a.load()] == ["B"]
