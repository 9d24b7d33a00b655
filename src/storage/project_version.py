"""Read the editor version a project was last opened with."""

from __future__ import annotations

import logging
import os
from typing import Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


def load_project_version(project_dir: str) -> Optional[str]:
    """Return ``m_EditorVersion`` from ProjectSettings/ProjectVersion.txt.

    Returns None when the file is missing, unreadable or has no version.
    """
    path = os.path.join(project_dir, *Constants.PROJECT_VERSION_PATH.split("/"))
    if not os.path.isfile(path):
        logger.debug("No project version file at %s", path)
        return None
    try:
        with open(path, "r", encoding="utf-8") as fh:
            # BaseLoader keeps versions like 2020.10 as strings.
            data = yaml.load(fh, Loader=yaml.BaseLoader)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return None
    if not isinstance(data, dict):
        return None
    version = data.get("m_EditorVersion")
    return str(version) if version is not None else None
