"""
Key-value blob storage used by the task store.

The task store only needs to read and overwrite opaque byte blobs under a
name. ``BlobStore`` describes that contract; the adapters below implement it
in memory and on the local filesystem.
"""
from pathlib import Path
from typing import Dict, Optional, Protocol, Union
from .io import atomic_write, read_bytes
from tasktrack.logs import get_logger

log = get_logger("data.blobs")

class BlobStore(Protocol):
    """Interface for reading and writing named blobs."""

    def read(self, key: str) -> Optional[bytes]:
        """Return the blob stored under key, or None if there is none."""
        ...

    def write(self, key: str, payload: bytes) -> None:
        """Store payload under key, replacing any previous blob."""
        ...

class MemoryBlobStore:
    """Blob store kept in a dict. Nothing survives the process."""

    def __init__(self, blobs: Optional[Dict[str, bytes]] = None):
        self.blobs: Dict[str, bytes] = dict(blobs or {})

    def read(self, key: str) -> Optional[bytes]:
        return self.blobs.get(key)

    def write(self, key: str, payload: bytes) -> None:
        self.blobs[key] = bytes(payload)

class FileBlobStore:
    """
    Blob store keeping one file per key inside a directory.

    Writes go through :func:`atomic_write`, so a failed write leaves the
    previous blob readable.
    """

    DEFAULT_DIR = Path.home() / ".local" / "share" / "tasktrack" / "data"

    def __init__(self, base_dir: Union[Path, str, None] = None, suffix: str = ".json"):
        self.base_dir = Path(base_dir).expanduser() if base_dir else FileBlobStore.DEFAULT_DIR
        self.suffix = suffix

    def path_for(self, key: str) -> Path:
        # Sanitize key for filesystem
        safe_key = "".join(c for c in key if c.isalnum() or c in ('-', '_')).strip()
        if not safe_key:
            raise ValueError(f"Invalid blob key: {key!r}")
        return self.base_dir / f"{safe_key}{self.suffix}"

    def read(self, key: str) -> Optional[bytes]:
        return read_bytes(self.path_for(key))

    def write(self, key: str, payload: bytes) -> None:
        path = self.path_for(key)
        atomic_write(path, payload, create_dirs=True)
        log.debug(f"Wrote {len(payload)} bytes to {path}")
