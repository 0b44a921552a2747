"""The add operation: parse, resolve, merge and patch.

Every failure before the final write leaves the manifest untouched; the
only earlier side effect is creating an empty deno.json when no manifest
exists at all.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List

from cli_config import AddOptions
from common.errors import ConfigError, DepAddError, ManifestIOError
from common.http_client import create_session
from common.logging_utils import extra_context, is_debug_enabled
from constants import ExitCodes
from manifest.config_file import Manifest
from manifest.discovery import discover_config_file
from manifest.jsonc import JsoncParseError, Object, parse_to_ast
from manifest.merger import generate_imports, merge_entries
from manifest.patcher import update_config_file_content
from versioning.models import AddPackageReq, SelectedPackage
from versioning.parser import parse_add_token
from versioning.resolvers import JsrVersionResolver, NpmVersionResolver
from versioning.service import resolve_all

logger = logging.getLogger(__name__)


def read_config_text(path: str) -> str:
    """Read the manifest; a blank file is treated as an empty object."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            contents = fh.read()
    except OSError as exc:
        raise ManifestIOError(f"Failed to read configuration file: {exc}") from exc
    return "{}\n" if not contents.strip() else contents


def write_config_text(path: str, text: str) -> None:
    try:
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as exc:
        raise ManifestIOError(f"Failed to update configuration file: {exc}") from exc


def patch_config_file(config_file: Manifest, existing_imports, selected_packages: List[SelectedPackage]) -> str:
    """Merge ``selected_packages`` into the manifest text and write it back.

    Returns:
        The text written to disk.
    """
    contents = read_config_text(config_file.path)
    try:
        doc = parse_to_ast(contents)
    except JsoncParseError as exc:
        raise ConfigError(f"Failed to parse {config_file.path}: {exc}") from exc
    if not isinstance(doc.value, Object):
        raise ConfigError("Failed updating config file due to no object.")

    import_list = merge_entries(existing_imports, selected_packages, config_file.is_npm())
    new_text = update_config_file_content(
        doc.value,
        contents,
        generate_imports(import_list),
        config_file.fmt_options(),
        config_file.imports_key(),
        config_file.file_name(),
    )
    write_config_text(config_file.path, new_text)
    return new_text


async def add(options: AddOptions) -> List[SelectedPackage]:
    """Add ``options.packages`` to the discovered manifest.

    Raises:
        DepAddError: Any parse, lookup, not-found, config or I/O failure.
    """
    add_reqs: List[AddPackageReq] = [parse_add_token(p) for p in options.packages]

    config_file = discover_config_file(options.discovery())
    existing_imports = config_file.existing_imports()

    async with create_session() as session:
        jsr_resolver = JsrVersionResolver(session, options.jsr_url)
        npm_resolver = NpmVersionResolver(session, options.npm_url)
        selected_packages = await resolve_all(
            add_reqs, jsr_resolver, npm_resolver, options.max_concurrency
        )

    patch_config_file(config_file, existing_imports, selected_packages)

    if is_debug_enabled(logger):
        logger.debug(
            "Add finished",
            extra=extra_context(
                event="function_exit",
                component="cli",
                action="add",
                target=config_file.path,
                outcome="success",
                count=len(selected_packages),
            ),
        )
    return selected_packages


def run_add(options: AddOptions) -> int:
    """Run ``add`` to completion and map failures to an exit code."""
    try:
        asyncio.run(add(options))
    except DepAddError as exc:
        logger.error("%s", exc)
        return exc.exit_code.value
    return ExitCodes.SUCCESS.value
