"""Error taxonomy shared by resolution, manifest handling and the CLI."""

from __future__ import annotations

from typing import Optional, Sequence


class OpenUpmError(Exception):
    """Base class for all expected failures."""


class PackumentNotFoundError(OpenUpmError):
    """A package does not exist in a registry or in the manifest."""

    def __init__(self, name: str):
        super().__init__(f"package not found: {name}")
        self.name = name

    def __eq__(self, other):
        return isinstance(other, PackumentNotFoundError) and other.name == self.name

    def __hash__(self):
        return hash((type(self), self.name))


class VersionNotFoundError(OpenUpmError):
    """A package exists but none of its versions matches the request.

    ``available_versions`` is kept in ascending semver order so callers can
    reverse it to suggest the newest versions first.
    """

    def __init__(self, name: str, requested_version: str, available_versions: Sequence[str]):
        super().__init__(
            f"version {requested_version} of {name} not found"
        )
        self.name = name
        self.requested_version = requested_version
        self.available_versions = list(available_versions)

    def __eq__(self, other):
        return (
            isinstance(other, VersionNotFoundError)
            and other.name == self.name
            and other.requested_version == self.requested_version
            and other.available_versions == self.available_versions
        )

    def __hash__(self):
        return hash((type(self), self.name, self.requested_version))


class RegistryFetchError(OpenUpmError):
    """Transport-level failure talking to a registry (not an authoritative 404)."""

    def __init__(self, url: str, status_code: Optional[int] = None, cause: Optional[str] = None):
        detail = f"status {status_code}" if status_code is not None else (cause or "request failed")
        super().__init__(f"could not fetch {url}: {detail}")
        self.url = url
        self.status_code = status_code
        self.cause = cause


class InvalidPackumentDataError(OpenUpmError):
    """A packument object was malformed."""

    def __init__(self, issue: str):
        super().__init__(f"A packument object was malformed: {issue}")
        self.issue = issue


class EditorIncompatibleError(OpenUpmError):
    """A package targets a newer editor than the one the project uses."""

    def __init__(self, required: str, actual: str):
        super().__init__(f"requires editor {required} but found {actual}")
        self.required = required
        self.actual = actual


class UnresolvedDependencyError(OpenUpmError):
    """One or more dependencies of a package could not be resolved."""

    def __init__(self, names: Sequence[str] = ()):
        super().__init__("A packuments dependency could not be resolved.")
        self.names = list(names)


class ManifestLoadError(OpenUpmError):
    """The project manifest could not be loaded."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path


class ManifestMissingError(ManifestLoadError):
    def __init__(self, path: str):
        super().__init__(path, f"project manifest not found at {path}")


class ManifestParseError(ManifestLoadError):
    def __init__(self, path: str, cause: str):
        super().__init__(path, f"project manifest at {path} is not valid: {cause}")
        self.cause = cause


class ManifestSaveError(OpenUpmError):
    def __init__(self, path: str, cause: str):
        super().__init__(f"can not write manifest json file {path}: {cause}")
        self.path = path
        self.cause = cause


class InvalidPackageReferenceError(OpenUpmError):
    """A command argument is not a valid ``name[@version]`` reference."""

    def __init__(self, reference: str, issue: str):
        super().__init__(f"invalid package reference '{reference}': {issue}")
        self.reference = reference
        self.issue = issue


class RegistryAuthLoadError(OpenUpmError):
    """Auth information for registries could not be loaded."""


class EnvParseError(OpenUpmError):
    """Command options or project settings could not be turned into an environment."""
