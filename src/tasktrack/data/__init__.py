"""
Data submodule: blob storage, encoding and the task store.
"""

from .blobs import BlobStore, FileBlobStore, MemoryBlobStore
from .io import DATA_JSON, DATA_YAML
from .store import TaskRecord, TaskStore

# Define what gets imported with `from data import *`
__all__ = [
    'BlobStore',
    'FileBlobStore',
    'MemoryBlobStore',
    'DATA_JSON',
    'DATA_YAML',
    'TaskRecord',
    'TaskStore',
]
