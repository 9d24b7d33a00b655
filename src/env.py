"""Environment a command runs in: project dir, registries and editor version."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from constants import Constants
from common.errors import EnvParseError, RegistryAuthLoadError
from domain.editor_version import EditorVersion, try_parse_editor_version
from domain.registry import Registry, RegistryUrl, coerce_registry_url
from storage.project_version import load_project_version
from storage.upm_config import get_upm_config_path, load_upm_config, try_get_auth_for_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Env:
    cwd: str
    system_user: bool
    upstream: bool
    registry: Registry
    upstream_registry: Registry
    # Raw m_EditorVersion of the project; None when unknown.
    editor_version: Optional[str] = None

    @property
    def parsed_editor_version(self) -> Optional[EditorVersion]:
        return try_parse_editor_version(self.editor_version)


def _determine_cwd(args: Any) -> str:
    chdir = getattr(args, "CHDIR", None)
    return os.path.abspath(chdir) if chdir else os.getcwd()


def _determine_primary_url(args: Any) -> RegistryUrl:
    raw = getattr(args, "REGISTRY", None)
    if not raw:
        return RegistryUrl.parse(Constants.REGISTRY_URL_OPENUPM)
    try:
        return coerce_registry_url(raw)
    except ValueError as exc:
        raise EnvParseError(str(exc)) from exc


def parse_env(args: Any) -> Env:
    """Turn parsed CLI options into an ``Env``.

    Raises:
        EnvParseError: If the registry option or the project dir is invalid.
        RegistryAuthLoadError: If .upmconfig.toml exists but can not be parsed.
    """
    system_user = bool(getattr(args, "SYSTEM_USER", False))
    upstream = getattr(args, "UPSTREAM", True) is not False

    config_path = get_upm_config_path(system_user)
    try:
        upm_config = load_upm_config(config_path)
    except RegistryAuthLoadError:
        logger.debug("Upmconfig load or parsing failed: %s", config_path)
        raise

    url = _determine_primary_url(args)
    auth = try_get_auth_for_registry(upm_config, url)
    if auth is None and upm_config is not None:
        logger.debug("No auth configured for %s in %s", url, config_path)
    registry = Registry(url=url, auth=auth)
    upstream_registry = Registry(url=RegistryUrl.parse(Constants.REGISTRY_URL_UNITY))

    cwd = _determine_cwd(args)
    if not os.path.isdir(cwd):
        raise EnvParseError(f"can not resolve path {cwd}")

    return Env(
        cwd=cwd,
        system_user=system_user,
        upstream=upstream,
        registry=registry,
        upstream_registry=upstream_registry,
        editor_version=load_project_version(cwd),
    )
