"""Load and save Packages/manifest.json."""

from __future__ import annotations

import json
import logging
import os

from constants import Constants
from common.errors import (
    ManifestLoadError,
    ManifestMissingError,
    ManifestParseError,
    ManifestSaveError,
)
from domain.project_manifest import UnityProjectManifest

logger = logging.getLogger(__name__)


def manifest_path_for(project_dir: str) -> str:
    return os.path.join(project_dir, *Constants.MANIFEST_PATH.split("/"))


def load_project_manifest(project_dir: str) -> UnityProjectManifest:
    """Read the project manifest of ``project_dir``.

    Raises:
        ManifestMissingError: If the file does not exist.
        ManifestParseError: If the file is not a valid manifest.
        ManifestLoadError: If the file can not be read.
    """
    path = manifest_path_for(project_dir)
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError as exc:
        raise ManifestMissingError(path) from exc
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ManifestParseError(path, str(exc)) from exc
    except OSError as exc:
        raise ManifestLoadError(path, f"could not read {path}: {exc.strerror or exc}") from exc

    try:
        return UnityProjectManifest.from_json(data)
    except ValueError as exc:
        raise ManifestParseError(path, str(exc)) from exc


def save_project_manifest(project_dir: str, manifest: UnityProjectManifest) -> None:
    """Write ``manifest`` with two-space indentation and a trailing newline.

    Raises:
        ManifestSaveError: If the file can not be written.
    """
    path = manifest_path_for(project_dir)
    content = json.dumps(manifest.to_json(), indent=2, ensure_ascii=False) + "\n"
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(content)
    except OSError as exc:
        raise ManifestSaveError(path, str(exc)) from exc
    logger.debug("Saved manifest to %s", path)
