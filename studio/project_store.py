"""
project_store.py: Per-episode pre-production document store.

Layout under <base_dir>/<story_bible_id>/:

    episodes/
        episode_0001.json   ← one document per episode, one key per tab
        episode_0002.json
        ...

Every tab writes through ``on_update(tab_name, tab_data)``; it replaces the
whole tab key, so concurrent writers to the same tab resolve as last write
wins while writes to different tabs never clobber each other's data.
"""

from __future__ import annotations

import copy
import logging
import re
from pathlib import Path
from typing import Any, Dict, List

from .document_io import Document, load_document, save_document

LOGGER = logging.getLogger(__name__)

TAB_NAMES = frozenset({
    "scriptBreakdown",
    "scripts",
    "casting",
    "locations",
    "equipment",
    "propsWardrobe",
    "storyboards",
    "shootingSchedule",
    "budget",
    "permits",
    "rehearsal",
    "marketing",
})

_EPISODE_FILE_RE = re.compile(r"^episode_(\d{4,})\.json$")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _episodes_dir(story_bible_id: str, base_dir: str | Path) -> Path:
    return Path(base_dir) / story_bible_id / "episodes"


def _episode_path(story_bible_id: str, base_dir: str | Path, episode_number: int) -> Path:
    return _episodes_dir(story_bible_id, base_dir) / f"episode_{episode_number:04d}.json"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_episode_document(
    story_bible_id: str,
    base_dir: str | Path,
    episode_number: int,
) -> Document:
    """Load the document for one episode.

    A missing document is not an error: an episode with no saved tabs yet
    yields a document carrying only its identifiers.

    Raises:
        json.JSONDecodeError: If the stored document is corrupt.
    """
    path = _episode_path(story_bible_id, base_dir, episode_number)
    if not path.exists():
        return {"storyBibleId": story_bible_id, "episodeNumber": episode_number}
    return load_document(path)


def on_update(
    story_bible_id: str,
    base_dir: str | Path,
    episode_number: int,
    tab_name: str,
    tab_data: Dict[str, Any],
) -> Document:
    """Persist *tab_data* as the new value of *tab_name* for one episode.

    Returns:
        The updated document as written to disk.

    Raises:
        ValueError: If *tab_name* is unknown or *tab_data* is not a dict.
    """
    if tab_name not in TAB_NAMES:
        raise ValueError(f"unknown tab {tab_name!r}; expected one of {sorted(TAB_NAMES)}")
    if not isinstance(tab_data, dict):
        raise ValueError(f"tab data for {tab_name!r} must be a dict")

    document = load_episode_document(story_bible_id, base_dir, episode_number)
    document[tab_name] = copy.deepcopy(tab_data)
    save_document(_episode_path(story_bible_id, base_dir, episode_number), document)
    LOGGER.info(
        "saved %s for %s episode %d", tab_name, story_bible_id, episode_number
    )
    return document


def list_episodes(story_bible_id: str, base_dir: str | Path) -> List[int]:
    """Episode numbers that have a stored document, ascending."""
    episodes_dir = _episodes_dir(story_bible_id, base_dir)
    if not episodes_dir.exists():
        return []
    numbers = []
    for path in episodes_dir.iterdir():
        m = _EPISODE_FILE_RE.match(path.name)
        if m:
            numbers.append(int(m.group(1)))
    return sorted(numbers)


def has_breakdown_and_script(document: Document) -> bool:
    """True when the episode has breakdown scenes and a full script.

    Equipment and location generation both require this.
    """
    breakdown = document.get("scriptBreakdown") or {}
    scripts = document.get("scripts") or {}
    return bool(breakdown.get("scenes")) and bool(scripts.get("fullScript"))


def arc_has_prerequisites(story_bible_id: str, base_dir: str | Path) -> bool:
    """True when at least one episode of the arc satisfies has_breakdown_and_script."""
    return any(
        has_breakdown_and_script(load_episode_document(story_bible_id, base_dir, n))
        for n in list_episodes(story_bible_id, base_dir)
    )
