"""
State file persistence — atomic read/write for LayoutState.

State is stored as JSON in .state/layout.json. Writes are atomic
(write to temp file, then rename) to prevent corruption if the
process crashes mid-write.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from buildlayout.core.models.state import LayoutState

logger = logging.getLogger(__name__)

# Default state file path (relative to the build.yml directory)
DEFAULT_STATE_DIR = ".state"
DEFAULT_STATE_FILE = "layout.json"


def default_state_path(base_dir: Path) -> Path:
    """Get the default state file path for a build."""
    return base_dir / DEFAULT_STATE_DIR / DEFAULT_STATE_FILE


def load_state(path: Path) -> LayoutState:
    """Load layout state from a JSON file.

    Returns:
        LayoutState. If the file is missing or corrupt, a fresh state.
    """
    if not path.is_file():
        logger.info("No state file at %s — starting fresh", path)
        return LayoutState()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        state = LayoutState.model_validate(data)
        logger.debug("Loaded state from %s (updated_at=%s)", path, state.updated_at)
        return state
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning("Cannot load state from %s: %s — starting fresh", path, e)
        return LayoutState()


def save_state(state: LayoutState, path: Path) -> None:
    """Save layout state to a JSON file (atomic write).

    Raises:
        OSError: If the file cannot be written.
    """
    state.touch()
    path.parent.mkdir(parents=True, exist_ok=True)

    content = json.dumps(state.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".layout_", suffix=".tmp")
    os.close(fd)
    tmp = Path(tmp_path)
    try:
        tmp.write_text(content, encoding="utf-8")
        tmp.replace(path)
        logger.debug("State saved to %s", path)
    except OSError as e:
        tmp.unlink(missing_ok=True)
        logger.error("Failed to save state to %s: %s", path, e)
        raise
