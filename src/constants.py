"""Constants used in the project."""

import logging
import os
from enum import Enum

logger = logging.getLogger(__name__)


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    PACKAGE_NOT_FOUND = 3
    PARSE_ERROR = 4
    CONFIG_ERROR = 5


class Registries(Enum):
    """Package registries supported by the program.

    Args:
        Enum (string): Registry scheme prefixes, without the colon.
    """

    JSR = "jsr"
    NPM = "npm"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_JSR = "https://jsr.io"
    REGISTRY_URL_NPM = "https://registry.npmjs.org"
    DENO_JSON_FILE = "deno.json"
    DENO_JSONC_FILE = "deno.jsonc"
    PACKAGE_JSON_FILE = "package.json"
    CONFIG_FILE_NAMES = ["depadd.yml", "depadd.yaml"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    MAX_CONCURRENCY = 10
    USER_AGENT = "depadd/0.1"
    FUTURE_FEATURES = False

    ENV_LOG_LEVEL = "DEPADD_LOG_LEVEL"
    ENV_CONFIG = "DEPADD_CONFIG"
    ENV_FUTURE = "DEPADD_FUTURE"
    ENV_JSR_URL = "DEPADD_JSR_URL"
    ENV_NPM_REGISTRY = "DEPADD_NPM_REGISTRY"


def _candidate_config_paths(cwd=None):
    """Return YAML config locations in lookup order."""
    paths = []
    explicit = os.environ.get(Constants.ENV_CONFIG)
    if explicit:
        paths.append(explicit)
    base = cwd or os.getcwd()
    for name in Constants.CONFIG_FILE_NAMES:
        paths.append(os.path.join(base, name))
    xdg = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    for name in Constants.CONFIG_FILE_NAMES:
        paths.append(os.path.join(xdg, "depadd", name))
    return paths


def _load_yaml_config(cwd=None):
    """Load the first YAML configuration file found, or an empty dict.

    A file that exists but cannot be parsed is reported and ignored so a
    broken user config never blocks the CLI.
    """
    import yaml  # pylint: disable=import-outside-toplevel

    for path in _candidate_config_paths(cwd):
        if not os.path.isfile(path):
            continue
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Ignoring unreadable config file %s: %s", path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring config file %s: top level is not a mapping", path)
            return {}
        logger.debug("Loaded configuration from %s", path)
        return data
    return {}


def _int_setting(value, name, current):
    """Return ``value`` as an int, or warn and keep ``current``."""
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid %s setting: %r", name, value)
        return current


def apply_yaml_config(cfg):
    """Apply a loaded YAML config mapping onto Constants."""
    registry = cfg.get("registry") or {}
    if isinstance(registry, dict):
        if registry.get("jsr_url"):
            Constants.REGISTRY_URL_JSR = str(registry["jsr_url"]).rstrip("/")
        if registry.get("npm_url"):
            Constants.REGISTRY_URL_NPM = str(registry["npm_url"]).rstrip("/")
    http = cfg.get("http") or {}
    if isinstance(http, dict) and http.get("request_timeout") is not None:
        Constants.REQUEST_TIMEOUT = _int_setting(
            http["request_timeout"], "http.request_timeout", Constants.REQUEST_TIMEOUT
        )
    resolution = cfg.get("resolution") or {}
    if isinstance(resolution, dict) and resolution.get("max_concurrency") is not None:
        Constants.MAX_CONCURRENCY = max(1, _int_setting(
            resolution["max_concurrency"], "resolution.max_concurrency", Constants.MAX_CONCURRENCY
        ))
    if "future" in cfg:
        Constants.FUTURE_FEATURES = bool(cfg["future"])
