from .fs_store import FileSystemMediaStore
from .fs_store import PathOutsideRootError
from .mime import sniff_bytes
from .mime import sniff_mime_type


__all__ = [
    "FileSystemMediaStore",
    "PathOutsideRootError",
    "sniff_bytes",
    "sniff_mime_type",
]
