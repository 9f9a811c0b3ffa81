# tests/test_file_cache.py
import time
from pathlib import Path

import pytest

from kvcache.errors import CacheBadRequestError
from kvcache.services.file_cache import FileCacheStore
from kvcache.services.keys import hash_key


def test_constructor_creates_root(tmp_path):
    root = tmp_path / "nested" / "cache"
    FileCacheStore(root)
    assert root.is_dir()


def test_store(file_cache, cache_dir):
    name = file_cache.store("testtype", "testkey", "testdata")

    assert name == hash_key("testkey")
    assert (cache_dir / "testtype").is_dir()
    assert (cache_dir / "testtype" / name).read_text() == "testdata"


def test_get(file_cache):
    file_cache.store("testtype", "testkey", "testdata")

    entry = file_cache.get("testtype", "testkey")

    assert entry.data == "testdata"
    assert entry.type == "testtype"
    assert entry.key == "testkey"
    assert entry.expires is None


def test_get_missing_returns_none(file_cache):
    assert file_cache.get("testtype", "missing") is None


@pytest.mark.parametrize("data, expected", [
    (42, "42"),
    (1.5, "1.5"),
    (True, "True"),
    ("", ""),
])
def test_store_coerces_scalars_to_strings(file_cache, data, expected):
    file_cache.store("t", "k", data)
    assert file_cache.get("t", "k").data == expected


@pytest.mark.parametrize("data", [{"a": 1}, ["a"], None, b"raw"])
def test_store_rejects_non_scalar(file_cache, data):
    with pytest.raises(CacheBadRequestError):
        file_cache.store("t", "k", data)


def test_store_overwrites_previous_value(file_cache):
    file_cache.store("t1", "k1", "first")
    file_cache.store("t1", "k1", "x")

    assert file_cache.get("t1", "k1").data == "x"
    assert file_cache.size("t1") == 1


def test_expiry_is_ignored(file_cache):
    file_cache.store("t", "k", "still here", int(time.time()) - 100)

    assert file_cache.get("t", "k").data == "still here"
    assert file_cache.gc() is True
    assert file_cache.get_all("k", ["t"])["t"].data == "still here"


def test_get_all(file_cache):
    expected = {
        "testtype1": "testdata1",
        "testtype2": "testdata2",
    }
    for type_, data in expected.items():
        file_cache.store(type_, "testkey", data)

    result = file_cache.get_all("testkey", ["testtype1", "testtype2", "testtype3"])

    assert {t: e.data for t, e in result.items()} == expected


def test_get_all_with_prefix(file_cache):
    file_cache.store("pfxa", "k", "only-a")

    result = file_cache.get_all("k", ["a", "b"], "pfx")

    assert list(result) == ["a"]
    assert result["a"].data == "only-a"


def test_get_all_requires_key_and_types(file_cache):
    with pytest.raises(CacheBadRequestError):
        file_cache.get_all("", ["t"])
    with pytest.raises(CacheBadRequestError):
        file_cache.get_all("k", [])


def test_size(file_cache, cache_dir):
    tostore = {
        "testkey1": "testdata1",
        "testkey2": "testdata2",
        "testkey3": "testdata3",
        "testkey4": "testdata4",
    }
    for key, data in tostore.items():
        file_cache.store("testtype", key, data)
    # Subdirectories are not entries
    (cache_dir / "testtype" / "stray").mkdir()

    assert file_cache.size("testtype") == len(tostore)
    assert file_cache.size("othertype") == 0


def test_delete(file_cache, cache_dir):
    deletetarget = file_cache.store("testtype1", "testkey1", "testdata1")
    sametype = file_cache.store("testtype1", "testkey2", "testdata2")
    samekey = file_cache.store("testtype2", "testkey1", "testdata3")
    diffall = file_cache.store("testtype2", "testkey2", "testdata3")

    assert file_cache.delete("testtype1", "testkey1") is True

    assert not (cache_dir / "testtype1" / deletetarget).exists()
    assert (cache_dir / "testtype1" / sametype).exists()
    assert (cache_dir / "testtype2" / samekey).exists()
    assert (cache_dir / "testtype2" / diffall).exists()


def test_get_all_rejects_unusable_type_before_reading(file_cache, monkeypatch):
    file_cache.store("a", "k", "v")
    reads = []
    monkeypatch.setattr(FileCacheStore, "_entry", lambda self, *args: reads.append(args))

    with pytest.raises(CacheBadRequestError):
        file_cache.get_all("k", ["a", "__"])
    assert reads == []


def test_delete_reports_failure_when_file_survives(file_cache, monkeypatch):
    name = file_cache.store("t", "k", "v")
    monkeypatch.setattr(Path, "unlink", lambda self, missing_ok=False: None)

    assert file_cache.delete("t", "k") is False
    assert (file_cache.root / "t" / name).is_file()


def test_delete_is_idempotent(file_cache):
    file_cache.store("t", "k", "v")

    assert file_cache.delete("t", "k") is True
    assert file_cache.delete("t", "k") is True
    assert file_cache.get("t", "k") is None


@pytest.mark.parametrize("call", [
    lambda c: c.get(None, "k"),
    lambda c: c.get("t", None),
    lambda c: c.size(None),
    lambda c: c.delete("t", ""),
    lambda c: c.store("", "k", "v"),
    lambda c: c.store("t", None, "v"),
])
def test_missing_type_or_key_is_bad_request(file_cache, call):
    with pytest.raises(CacheBadRequestError):
        call(file_cache)


def test_type_is_sanitized(file_cache, cache_dir):
    name = file_cache.store("../te-st/type", "k", "v")

    assert (cache_dir / "testtype" / name).is_file()
    assert file_cache.get("testtype", "k").data == "v"


def test_type_without_alphanumerics_is_bad_request(file_cache):
    with pytest.raises(CacheBadRequestError):
        file_cache.store("../", "k", "v")


def test_key_hashes_are_memoised_and_bounded(tmp_path):
    cache = FileCacheStore(tmp_path, key_cache_capacity=2)
    for key in ("a", "b", "c"):
        cache.store("t", key, key)

    assert len(cache._keys) == 2
    assert "a" not in cache._keys
    # Evicted hashes are recomputed identically
    assert cache.get("t", "a").data == "a"
