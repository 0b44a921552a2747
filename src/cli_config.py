"""Assembly of runtime options from CLI flags, environment and YAML config.

Precedence is CLI flag, then environment variable, then YAML config, then
the built-in defaults on ``Constants``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from constants import Constants, _load_yaml_config, apply_yaml_config
from manifest.discovery import DiscoveryOptions

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class AddOptions:
    """Everything the add operation needs, passed explicitly."""
    packages: List[str] = field(default_factory=list)
    cwd: str = "."
    config: Optional[str] = None
    enable_future_features: bool = False
    jsr_url: str = Constants.REGISTRY_URL_JSR
    npm_url: str = Constants.REGISTRY_URL_NPM
    max_concurrency: int = Constants.MAX_CONCURRENCY

    def discovery(self) -> DiscoveryOptions:
        return DiscoveryOptions(
            cwd=self.cwd,
            config=self.config,
            enable_future_features=self.enable_future_features,
        )


def env_flag(name: str) -> bool:
    """Return True when environment variable ``name`` holds a truthy value."""
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def build_add_options(args) -> AddOptions:
    """Build AddOptions from parsed CLI arguments."""
    cwd = os.path.abspath(getattr(args, "CWD", None) or os.getcwd())
    apply_yaml_config(_load_yaml_config(cwd))

    jsr_url = (
        getattr(args, "JSR_URL", None)
        or os.environ.get(Constants.ENV_JSR_URL)
        or Constants.REGISTRY_URL_JSR
    )
    npm_url = (
        getattr(args, "NPM_REGISTRY", None)
        or os.environ.get(Constants.ENV_NPM_REGISTRY)
        or Constants.REGISTRY_URL_NPM
    )
    future = (
        bool(getattr(args, "UNSTABLE_PACKAGE_JSON", False))
        or env_flag(Constants.ENV_FUTURE)
        or Constants.FUTURE_FEATURES
    )
    options = AddOptions(
        packages=list(getattr(args, "packages", None) or []),
        cwd=cwd,
        config=getattr(args, "CONFIG", None),
        enable_future_features=future,
        jsr_url=jsr_url.rstrip("/"),
        npm_url=npm_url.rstrip("/"),
        max_concurrency=Constants.MAX_CONCURRENCY,
    )
    logger.debug("Add options: %s", options)
    return options
