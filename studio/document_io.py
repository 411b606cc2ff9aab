"""
document_io.py: Load and save pre-production JSON documents.

Documents are written with sorted keys and consistent indentation so that
identical document states always produce byte-identical files.
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

Document = Dict[str, Any]


def load_document(path: Union[str, Path]) -> Document:
    """Load a document from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def save_document(path: Union[str, Path], document: Document) -> None:
    """Save a document to a JSON file (sorted keys, indent 2, trailing newline).

    The parent directory is created when missing.
    """
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document, f, sort_keys=True, indent=2, ensure_ascii=False)
        f.write("\n")  # POSIX trailing newline
