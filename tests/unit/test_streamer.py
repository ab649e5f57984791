from pathlib import Path
from typing import Any

import pytest

from stream_video.api.errors import InternalError
from stream_video.reader.streamer import ShortReadError
from stream_video.reader.streamer import open_source
from stream_video.reader.streamer import stream_window


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "data.bin"
    path.write_bytes(bytes(i % 256 for i in range(10_000)))
    return path


class _TrackingSource:
    """Wraps an aiofiles handle and records close() calls."""

    def __init__(self, inner: Any) -> None:
        self.inner = inner
        self.closed = False

    async def seek(self, offset: int) -> int:
        return await self.inner.seek(offset)

    async def read(self, size: int) -> bytes:
        return await self.inner.read(size)

    async def close(self) -> None:
        self.closed = True
        await self.inner.close()


@pytest.mark.asyncio
async def test_stream_window_copies_exact_bytes(data_file: Path) -> None:
    expected = data_file.read_bytes()[1234 : 1234 + 5000]
    source = await open_source(str(data_file))

    chunks = [chunk async for chunk in stream_window(source, 1234, 5000, buffer_size=1024)]

    assert b"".join(chunks) == expected
    assert all(len(chunk) <= 1024 for chunk in chunks)
    assert len(chunks) == 5


@pytest.mark.asyncio
async def test_stream_window_single_byte(data_file: Path) -> None:
    source = await open_source(str(data_file))

    chunks = [chunk async for chunk in stream_window(source, 9_999, 1)]

    assert chunks == [bytes([9_999 % 256])]


@pytest.mark.asyncio
async def test_stream_window_closes_source_on_success(data_file: Path) -> None:
    source = _TrackingSource(await open_source(str(data_file)))

    async for _ in stream_window(source, 0, 100):
        pass

    assert source.closed is True


@pytest.mark.asyncio
async def test_stream_window_closes_source_when_abandoned(data_file: Path) -> None:
    source = _TrackingSource(await open_source(str(data_file)))
    gen = stream_window(source, 0, 10_000, buffer_size=100)

    first = await gen.__anext__()
    await gen.aclose()

    assert len(first) == 100
    assert source.closed is True


@pytest.mark.asyncio
async def test_stream_window_short_read_aborts(data_file: Path) -> None:
    source = _TrackingSource(await open_source(str(data_file)))

    with pytest.raises(ShortReadError):
        async for _ in stream_window(source, 9_000, 5_000):
            pass

    assert source.closed is True


@pytest.mark.asyncio
async def test_open_source_missing_file_is_internal_error(tmp_path: Path) -> None:
    with pytest.raises(InternalError) as exc_info:
        await open_source(str(tmp_path / "gone.mp4"))
    assert exc_info.value.status_code == 500
