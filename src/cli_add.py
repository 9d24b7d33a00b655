"""The add command: resolve packages and record them in the project manifest."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from common.errors import (
    EditorIncompatibleError,
    InvalidPackageReferenceError,
    InvalidPackumentDataError,
    OpenUpmError,
    PackumentNotFoundError,
    UnresolvedDependencyError,
    VersionNotFoundError,
)
from common.logging_utils import extra_context, is_debug_enabled
from domain.editor_version import compare_editor_version, try_parse_editor_version
from domain.packument import PackumentVersion, target_editor_version_for
from domain.project_manifest import (
    UnityProjectManifest,
    add_dependency,
    add_testable,
    map_scoped_registry,
)
from domain.scoped_registry import add_scope, make_empty_scoped_registry_for
from domain.versions import SpecKind, make_package_reference, split_package_reference
from env import Env
from registry.client import PackumentFetcher
from registry.prefetch import prefetch_packuments
from resolving.dependencies import resolve_dependencies
from resolving.models import FetchPackument
from resolving.resolver import try_resolve_from_registries
from storage.manifest_io import load_project_manifest, save_project_manifest

logger = logging.getLogger(__name__)


def _log_resolve_error(name: str, error: OpenUpmError) -> None:
    if isinstance(error, PackumentNotFoundError):
        logger.error("package not found: %s", name)
    elif isinstance(error, VersionNotFoundError):
        versions = ", ".join(reversed(error.available_versions))
        logger.warning(
            "version %s is not a valid choice of: %s", error.requested_version, versions
        )
    else:
        logger.error("could not resolve %s: %s", name, error)


def _check_editor_version(env: Env, version: PackumentVersion, force: bool) -> None:
    """Raise if the package needs a newer editor than the project uses."""
    target = target_editor_version_for(version)
    if target is None:
        return
    required = try_parse_editor_version(target)
    project = env.parsed_editor_version
    if env.editor_version is not None and project is None:
        logger.warning("%s is unknown, the editor version check is disabled", env.editor_version)

    if required is None:
        logger.warning("package.unity %s is not valid", target)
        if not force:
            logger.info(
                "suggest: contact the package author to fix the issue, "
                "or run with option -f to ignore the warning"
            )
            raise InvalidPackumentDataError("Editor-version not valid.")
        return

    if project is not None and compare_editor_version(project, required) < 0:
        logger.warning("requires %s but found %s", target, env.editor_version)
        if not force:
            logger.info(
                "suggest: upgrade the editor to %s, or run with option -f to ignore the warning",
                target,
            )
            raise EditorIncompatibleError(target, env.editor_version)


def _collect_scopes(
    fetch: FetchPackument,
    env: Env,
    manifest: UnityProjectManifest,
    name: str,
    spec,
    force: bool,
) -> List[str]:
    """Walk the dependencies of ``name`` and return the names to scope."""
    logger.debug("fetch: %s", make_package_reference(name, spec))
    resolved, unresolved = resolve_dependencies(
        fetch,
        env.registry,
        env.upstream_registry,
        name,
        spec,
        deep=True,
        installed=manifest.dependencies,
        use_upstream=env.upstream,
    )
    scopes = [dep.name for dep in resolved if not dep.upstream and not dep.internal]

    missing = []
    for dep in unresolved:
        if dep.name in manifest.dependencies:
            continue
        missing.append(dep.name)
        if isinstance(dep.reason, VersionNotFoundError):
            logger.info(
                "suggest: to install %s or a replaceable version manually",
                make_package_reference(dep.name, dep.reason.requested_version),
            )
        else:
            _log_resolve_error(dep.name, dep.reason)

    if missing and not force:
        logger.error(
            "missing dependencies: please resolve the issue or run with option -f to ignore the warning"
        )
        raise UnresolvedDependencyError(missing)
    return scopes


def _try_add_to_manifest(
    manifest: UnityProjectManifest,
    reference: str,
    env: Env,
    fetch: FetchPackument,
    test: bool,
    force: bool,
) -> Tuple[UnityProjectManifest, bool]:
    """Add one package reference.

    Returns:
        The updated manifest and whether it differs from ``manifest``.
    """
    try:
        name, spec = split_package_reference(reference)
    except ValueError as exc:
        raise InvalidPackageReferenceError(reference, str(exc)) from exc

    is_upstream = False
    scopes: List[str] = []
    if spec is not None and spec.kind == SpecKind.URL:
        version_to_add = spec.raw
    else:
        resolved, error, is_upstream = try_resolve_from_registries(
            fetch, name, spec, env.registry, env.upstream_registry, env.upstream
        )
        if error is not None:
            _log_resolve_error(name, error)
            raise error

        version_to_add = resolved.packument_version.version
        _check_editor_version(env, resolved.packument_version, force)
        if not is_upstream:
            scopes = _collect_scopes(fetch, env, manifest, name, spec, force)

    old_version = manifest.dependencies.get(name)
    dirty = False
    manifest = add_dependency(manifest, name, version_to_add)
    if old_version is None:
        logger.info("added %s", make_package_reference(name, version_to_add))
        dirty = True
    elif old_version != version_to_add:
        logger.info("modified %s %s => %s", name, old_version, version_to_add)
        dirty = True
    else:
        logger.info("existed %s", make_package_reference(name, version_to_add))

    if not is_upstream and scopes:
        before = manifest.scoped_registries

        def _add_scopes(initial):
            updated = initial or make_empty_scoped_registry_for(env.registry.url)
            for scope in scopes:
                updated = add_scope(updated, scope)
            return updated

        manifest = map_scoped_registry(manifest, env.registry.url, _add_scopes)
        dirty = dirty or manifest.scoped_registries != before

    if test:
        before = manifest.testables
        manifest = add_testable(manifest, name)
        dirty = dirty or manifest.testables != before

    if is_debug_enabled(logger):
        logger.debug(
            "Package processed",
            extra=extra_context(
                event="decision",
                component="cli_add",
                action="add",
                outcome="dirty" if dirty else "unchanged",
                target=name,
                count=len(scopes)
            )
        )
    return manifest, dirty


def add_packages(
    references: Sequence[str],
    env: Env,
    fetch: Optional[FetchPackument] = None,
    test: bool = False,
    force: bool = False,
    load: Callable[[str], UnityProjectManifest] = load_project_manifest,
    save: Callable[[str, UnityProjectManifest], None] = save_project_manifest,
) -> bool:
    """Add ``references`` to the manifest of ``env.cwd``.

    Every reference is attempted even after one fails, so all problems are
    reported at once, but nothing is saved unless all of them succeed.

    Returns:
        True if the manifest was written.

    Raises:
        OpenUpmError: The first failure, after all references were tried.
    """
    if fetch is None:
        fetch = PackumentFetcher()
    if isinstance(fetch, PackumentFetcher) and len(references) > 1:
        names = []
        for reference in references:
            try:
                name, spec = split_package_reference(reference)
            except ValueError:
                continue
            if spec is None or spec.kind != SpecKind.URL:
                names.append(name)
        prefetch_packuments(fetch, env.registry, names)

    manifest = load(env.cwd)

    dirty = False
    errors: List[OpenUpmError] = []
    for reference in references:
        try:
            manifest, changed = _try_add_to_manifest(manifest, reference, env, fetch, test, force)
        except OpenUpmError as exc:
            errors.append(exc)
            continue
        dirty = dirty or changed

    if errors:
        if dirty:
            logger.error("manifest not saved because %d package(s) failed", len(errors))
        raise errors[0]

    if dirty:
        save(env.cwd, manifest)
        logger.info("please open Unity project to apply changes")
    return dirty
