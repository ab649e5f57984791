import os
from pathlib import Path
from typing import Any
from typing import Callable
from typing import Generator

import dotenv
import pytest

from stream_video.config import Config
from stream_video.config import get_config


# Minimal ISO-BMFF header; sniffs as video/mp4
MP4_HEADER = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom"


@pytest.fixture(scope="session", autouse=True)
def _load_test_env() -> Generator[None, None, None]:
    """Load test environment variables from the defaults file."""
    project_root = Path(__file__).parents[2]
    dotenv.load_dotenv(project_root / ".env.defaults", override=True)
    os.environ["ENVIRONMENT"] = "test"
    yield


@pytest.fixture
def media_root(tmp_path: Path) -> Path:
    root = tmp_path / "videos"
    root.mkdir()
    return root


@pytest.fixture
def make_media(media_root: Path) -> Callable[..., Path]:
    """Create a file under the media root.

    Sizes beyond the supplied content are filled with a sparse hole, so large
    files cost nothing on disk.
    """

    def _make(relative: str, size: int, header: bytes = MP4_HEADER, pattern: bool = False) -> Path:
        path = media_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if pattern:
            body = bytes(i % 251 for i in range(size))
            path.write_bytes(header[:size] + body[len(header[:size]) :])
        else:
            with path.open("wb") as f:
                f.write(header[:size])
                f.truncate(size)
        return path

    return _make


@pytest.fixture
def config(media_root: Path) -> Config:
    return get_config(storage_root=str(media_root))


@pytest.fixture
def app(config: Config) -> Any:
    from stream_video.main import factory

    return factory(config)
