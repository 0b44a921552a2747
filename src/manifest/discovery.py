"""Locating (or creating) the manifest to operate on."""

from __future__ import annotations

import logging
import os
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import List, Optional

from constants import Constants
from common.errors import ConfigError, ManifestIOError, RemoteManifestError
from common.logging_utils import extra_context, is_debug_enabled
from .config_file import DenoConfig, Manifest, PackageJson

logger = logging.getLogger(__name__)

DENO_CONFIG_NAMES = [Constants.DENO_JSON_FILE, Constants.DENO_JSONC_FILE]


@dataclass(frozen=True)
class DiscoveryOptions:
    """Process-level inputs for manifest discovery."""
    cwd: str
    config: Optional[str] = None
    enable_future_features: bool = False


def is_remote_location(location: str) -> bool:
    """True for URLs whose scheme is not ``file`` (drive letters excluded)."""
    scheme = urllib.parse.urlsplit(location).scheme
    return len(scheme) > 1 and scheme.lower() != "file"


def _local_path(location: str, cwd: str) -> str:
    if urllib.parse.urlsplit(location).scheme.lower() == "file":
        location = urllib.request.url2pathname(urllib.parse.urlsplit(location).path)
    return os.path.abspath(os.path.join(cwd, location))


def find_upwards(start: str, names: List[str]) -> Optional[str]:
    """Return the first ``names`` match in ``start`` or its ancestors."""
    current = os.path.abspath(start)
    while True:
        for name in names:
            candidate = os.path.join(current, name)
            if os.path.isfile(candidate):
                return candidate
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent


def _discover(options: DiscoveryOptions) -> Optional[Manifest]:
    if options.config:
        if is_remote_location(options.config):
            raise RemoteManifestError("Can't add dependencies to a remote configuration file")
        path = _local_path(options.config, options.cwd)
        if not os.path.isfile(path):
            raise ConfigError(f"Config file not found: {path}")
        return DenoConfig.load(path)

    # When both are present, deno.json wins.
    deno_path = find_upwards(options.cwd, DENO_CONFIG_NAMES)
    if deno_path:
        return DenoConfig.load(deno_path)
    package_json_path = find_upwards(options.cwd, [Constants.PACKAGE_JSON_FILE])
    if package_json_path and options.enable_future_features:
        return PackageJson.load(package_json_path)
    if package_json_path:
        logger.debug("Ignoring %s; package.json support is not enabled", package_json_path)
    return None


def discover_config_file(options: DiscoveryOptions) -> Manifest:
    """Get the preferred config file to operate on.

    If no config file is present, creates a ``deno.json`` in the working
    directory and discovers again.

    Raises:
        RemoteManifestError: When ``--config`` points at a remote URL.
        ConfigError: For unsupported or malformed config files.
        ManifestIOError: When the new deno.json cannot be written.
    """
    manifest = _discover(options)
    if manifest is None:
        path = os.path.join(options.cwd, Constants.DENO_JSON_FILE)
        try:
            with open(path, "w", encoding="utf-8") as fh:
                fh.write("{}\n")
        except OSError as exc:
            raise ManifestIOError(f"Failed to create deno.json file: {exc}") from exc
        logger.info("Created deno.json configuration file.")
        manifest = _discover(options)
        if manifest is None:
            raise ConfigError("config not found, but it was just created")

    if is_debug_enabled(logger):
        logger.debug(
            "Selected config file",
            extra=extra_context(
                event="decision",
                component="discovery",
                action="discover_config_file",
                target=manifest.path,
                outcome="package_json" if manifest.is_npm() else "deno_config",
            ),
        )
    return manifest
