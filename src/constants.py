"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    PACKAGE_ERROR = 3
    ENV_ERROR = 4


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_OPENUPM = "https://package.openupm.com"
    REGISTRY_URL_UNITY = "https://packages.unity.com"
    NPM_INSTALL_ACCEPT = (
        "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8, */*"
    )
    USER_AGENT = "openupm-py/1.0"

    MANIFEST_PATH = "Packages/manifest.json"
    PROJECT_VERSION_PATH = "ProjectSettings/ProjectVersion.txt"
    UPM_CONFIG_FILE = ".upmconfig.toml"
    ENV_UPM_CONFIG_FILE = "UPM_USER_CONFIG_FILE"
    ENV_LOG_LEVEL = "OPENUPM_LOG_LEVEL"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    PREFETCH_MAX_CONCURRENCY = 8

    # Packages shipped with the editor; never served by a registry.
    BUILTIN_PACKAGE_PREFIX = "com.unity.modules."
    BUILTIN_PACKAGES = frozenset({
        "com.unity.ugui",
        "com.unity.test-framework",
        "com.unity.ext.nunit",
    })
