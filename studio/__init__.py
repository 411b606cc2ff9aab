# Pre-production documents, inventory and budget aggregation
from .document_io import Document
from .project_store import TAB_NAMES, load_episode_document, on_update
from .inventory import JsonFileStore, KeyValueStore

__all__ = [
    "Document",
    "TAB_NAMES",
    "load_episode_document",
    "on_update",
    "JsonFileStore",
    "KeyValueStore",
]
