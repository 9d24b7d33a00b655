"""The remove command: drop packages from the project manifest."""

from __future__ import annotations

import logging
from typing import Callable, List, Sequence

from common.errors import InvalidPackageReferenceError, OpenUpmError
from domain.dependency_management import try_remove_project_dependency
from domain.project_manifest import UnityProjectManifest
from domain.versions import make_package_reference, split_package_reference
from env import Env
from storage.manifest_io import load_project_manifest, save_project_manifest

logger = logging.getLogger(__name__)


def remove_packages(
    references: Sequence[str],
    env: Env,
    load: Callable[[str], UnityProjectManifest] = load_project_manifest,
    save: Callable[[str, UnityProjectManifest], None] = save_project_manifest,
) -> bool:
    """Remove the named packages from the manifest of ``env.cwd``.

    References must not carry a version. Nothing is saved if any name is
    invalid or missing from the manifest.

    Returns:
        True if the manifest was written.

    Raises:
        OpenUpmError: The first failure, after all names were tried.
    """
    manifest = load(env.cwd)
    errors: List[OpenUpmError] = []
    removed_any = False

    for reference in references:
        try:
            name, spec = split_package_reference(reference)
        except ValueError as exc:
            errors.append(InvalidPackageReferenceError(reference, str(exc)))
            logger.warning("invalid package name: %s", reference)
            continue
        if spec is not None:
            errors.append(InvalidPackageReferenceError(reference, "do not specify a version"))
            logger.warning("please do not specify a version (write '%s' instead)", name)
            continue

        result, error = try_remove_project_dependency(manifest, name)
        if error is not None:
            logger.error("package not found: %s", name)
            errors.append(error)
            continue
        manifest, removed = result
        logger.info("removed %s", make_package_reference(removed.name, removed.version))
        removed_any = True

    if errors:
        raise errors[0]

    if removed_any:
        save(env.cwd, manifest)
        logger.info("please open Unity project to apply changes")
    return removed_any
