"""Merging resolved packages into a manifest's dependency map."""

from __future__ import annotations

import json
import logging
from typing import Dict, Iterable, List, Tuple

from constants import Registries
from versioning.models import SelectedPackage

logger = logging.getLogger(__name__)

_NPM_PREFIX = f"{Registries.NPM.value}:"
_JSR_PREFIX = f"{Registries.JSR.value}:"


def package_json_dependency_entry(selected: SelectedPackage) -> Tuple[str, str]:
    """Return the ``(key, specifier)`` pair stored in package.json.

    npm packages are stored under their bare name. JSR packages go through
    the JSR npm compatibility registry: ``@scope/name`` becomes
    ``npm:@jsr/scope__name``.
    """
    if selected.package_name.startswith(_NPM_PREFIX):
        return selected.package_name[len(_NPM_PREFIX):], selected.version_req
    if selected.package_name.startswith(_JSR_PREFIX):
        jsr_package = selected.package_name[len(_JSR_PREFIX):]
        if jsr_package.startswith("@"):
            jsr_package = jsr_package[1:]
        scope_replaced = jsr_package.replace("/", "__")
        return selected.import_name, f"npm:@jsr/{scope_replaced}@{selected.version_req}"
    return selected.package_name, selected.version_req


def deno_config_entry(selected: SelectedPackage) -> Tuple[str, str]:
    """Return the ``(import name, specifier)`` pair stored in deno.json."""
    return selected.import_name, f"{selected.package_name}@{selected.version_req}"


def merge_entries(
    existing_imports: Dict[str, str],
    selected_packages: Iterable[SelectedPackage],
    is_npm: bool,
) -> List[Tuple[str, str]]:
    """Merge new packages into the existing map and sort by key.

    New entries overwrite existing ones with the same key. Each addition is
    announced at INFO level.
    """
    merged = dict(existing_imports)
    for selected in selected_packages:
        logger.info(
            "Add %s - %s@%s",
            selected.import_name,
            selected.package_name,
            selected.version_req,
        )
        if is_npm:
            name, version = package_json_dependency_entry(selected)
        else:
            name, version = deno_config_entry(selected)
        merged[name] = version
    return sorted(merged.items(), key=lambda kv: kv[0])


def generate_imports(packages_to_version: List[Tuple[str, str]]) -> str:
    """Render ``"key": "value"`` lines joined by commas, without braces."""
    return ",\n".join(
        f"{json.dumps(package, ensure_ascii=False)}: {json.dumps(version, ensure_ascii=False)}"
        for package, version in packages_to_version
    )
