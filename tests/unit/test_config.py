import os
from pathlib import Path

import pytest

from stream_video.config import SAFARI_BROWSER_PATTERN
from stream_video.config import Config
from stream_video.config import get_config


def test_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in list(os.environ):
        if key.startswith("STREAM_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("STREAM_STORAGE_ROOT", str(tmp_path))

    cfg = get_config()

    assert cfg.storage_root == os.path.realpath(tmp_path)
    assert cfg.allowed_mime_types == frozenset({"video/mp4", "video/quicktime", "video/webm"})
    assert cfg.cache_duration_seconds == 604800
    assert cfg.first_chunk_size == 131072
    assert cfg.chunk_size == 4194304
    assert cfg.legacy_browser_pattern == SAFARI_BROWSER_PATTERN


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("STREAM_STORAGE_ROOT", str(tmp_path))
    monkeypatch.setenv("STREAM_ALLOWED_MIME_TYPES", " video/quicktime , ,video/x-matroska")
    monkeypatch.setenv("STREAM_CHUNK_SIZE", "1048576")
    monkeypatch.setenv("STREAM_CACHE_DURATION_SECONDS", "60")

    cfg = get_config()

    assert cfg.allowed_mime_types == frozenset({"video/quicktime", "video/x-matroska"})
    assert cfg.chunk_size == 1048576
    assert cfg.cache_duration_seconds == 60


def test_keyword_overrides_win(tmp_path: Path) -> None:
    cfg = get_config(storage_root=str(tmp_path), allowed_mime_types={"video/mp4"}, first_chunk_size=1024)

    assert cfg.allowed_mime_types == frozenset({"video/mp4"})
    assert cfg.first_chunk_size == 1024


def test_config_is_immutable(tmp_path: Path) -> None:
    cfg = get_config(storage_root=str(tmp_path))

    with pytest.raises(AttributeError):
        cfg.chunk_size = 1  # type: ignore[misc]


@pytest.mark.parametrize(
    "overrides",
    [
        {"first_chunk_size": 0},
        {"chunk_size": -1},
        {"read_buffer_size": 0},
        {"cache_duration_seconds": -5},
        {"allowed_mime_types": ""},
        {"storage_root": " "},
    ],
)
def test_invalid_values_are_rejected(tmp_path: Path, overrides: dict) -> None:
    values = {"storage_root": str(tmp_path), **overrides}
    with pytest.raises(ValueError):
        get_config(**values)


def test_config_class_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STREAM_FIRST_CHUNK_SIZE", "2048")

    assert Config().first_chunk_size == 2048
