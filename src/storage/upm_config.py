"""Read registry credentials from .upmconfig.toml."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, Mapping, Optional

try:
    import tomllib as toml  # type: ignore
except ImportError:  # Python < 3.11
    import tomli as toml  # type: ignore

from constants import Constants
from common.errors import RegistryAuthLoadError
from domain.registry import AuthInfo, RegistryUrl

logger = logging.getLogger(__name__)


def get_upm_config_dir(system_user: bool = False) -> str:
    """Directory holding .upmconfig.toml for the current or the system user."""
    if not system_user:
        return os.path.expanduser("~")
    if sys.platform.startswith("win"):
        all_users = os.environ.get("ALLUSERSPROFILE", r"C:\ProgramData")
        return os.path.join(all_users, "Unity", "config", "ServiceAccounts")
    if sys.platform == "darwin":
        return "/Library/Application Support/Unity/config/ServiceAccounts"
    return "/etc/upm"


def get_upm_config_path(system_user: bool = False) -> str:
    override = os.environ.get(Constants.ENV_UPM_CONFIG_FILE)
    if override:
        return os.path.expanduser(override)
    return os.path.join(get_upm_config_dir(system_user), Constants.UPM_CONFIG_FILE)


def load_upm_config(path: str) -> Optional[Dict[str, Any]]:
    """Load the toml file at ``path``; None if it does not exist.

    Raises:
        RegistryAuthLoadError: If the file exists but is not valid toml.
    """
    try:
        with open(path, "rb") as fh:
            return toml.load(fh) or {}
    except FileNotFoundError:
        return None
    except (OSError, toml.TOMLDecodeError) as exc:
        raise RegistryAuthLoadError(f"could not load {path}: {exc}") from exc


def _auth_from_entry(entry: Mapping[str, Any]) -> Optional[AuthInfo]:
    if isinstance(entry.get("token"), str) and entry["token"]:
        return AuthInfo(token=entry["token"])
    if isinstance(entry.get("_auth"), str) and entry["_auth"]:
        try:
            return AuthInfo.from_basic(entry["_auth"])
        except ValueError:
            return None
    if isinstance(entry.get("username"), str) and isinstance(entry.get("password"), str):
        return AuthInfo(username=entry["username"], password=entry["password"])
    return None


def try_get_auth_for_registry(config: Optional[Mapping[str, Any]], url: RegistryUrl) -> Optional[AuthInfo]:
    """Find the credentials configured for ``url``.

    Entries are matched after url normalization, so trailing slashes or
    letter case in the toml keys do not matter.
    """
    if not config:
        return None
    npm_auth = config.get("npmAuth")
    if not isinstance(npm_auth, Mapping):
        return None
    for key, entry in npm_auth.items():
        try:
            entry_url = RegistryUrl.parse(key)
        except ValueError:
            logger.debug("Ignoring npmAuth entry with invalid url %s", key)
            continue
        if entry_url == url and isinstance(entry, Mapping):
            return _auth_from_entry(entry)
    return None
