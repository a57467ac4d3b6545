"""Loading the participant roster from disk."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from dotenv import load_dotenv

from .raffle.participants import Participant

logger = logging.getLogger(__name__)

# Project root directory (repo root)
ROOT_DIR = Path(__file__).resolve().parents[1]
DEFAULT_ROSTER_PATH = "./data/guides.json"


def resolve_roster_path(path: Optional[Union[str, Path]] = None) -> Path:
    """Return the roster file location.

    ``path`` wins over the ``ROSTER_PATH`` environment variable, which wins
    over :data:`DEFAULT_ROSTER_PATH`. Relative paths are resolved against the
    project root.
    """
    if path is None:
        load_dotenv()
        path = os.getenv("ROSTER_PATH", DEFAULT_ROSTER_PATH)
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = ROOT_DIR / candidate
    return candidate.resolve()


def load_roster(path: Optional[Union[str, Path]] = None) -> list[Participant]:
    """Read the roster JSON array and return it as participants.

    Raises
    ------
    ValueError
        If the document is not a JSON array.
    """
    roster_path = resolve_roster_path(path)
    with roster_path.open(encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f"Roster file {roster_path} must contain a JSON array")

    participants = [Participant.from_json(item) for item in data]
    logger.info(f"Loaded {len(participants)} participants from {roster_path}")
    return participants


__all__ = ["DEFAULT_ROSTER_PATH", "load_roster", "resolve_roster_path"]
