"""The two manifest kinds dependencies can be added to.

``DenoConfig`` (deno.json / deno.jsonc, dependencies under ``imports``) and
``PackageJson`` (dependencies under ``dependencies``) expose the same
accessors; callers work with the ``Manifest`` union and never check the
concrete type except through ``is_npm()``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from constants import Constants
from common.errors import ConfigError, ManifestIOError
from .formatter import FmtOptions
from .jsonc import JsoncParseError, parse_to_ast, to_python

logger = logging.getLogger(__name__)


class DenoConfigFormat(Enum):
    """File flavours of the native config."""
    JSON = Constants.DENO_JSON_FILE
    JSONC = Constants.DENO_JSONC_FILE

    @classmethod
    def from_path(cls, path: str) -> "DenoConfigFormat":
        """Map a config path to its format.

        Raises:
            ConfigError: For any file name other than deno.json / deno.jsonc.
        """
        file_name = os.path.basename(path)
        for fmt in cls:
            if fmt.value == file_name:
                return fmt
        raise ConfigError(f"Unsupported deno config file: {file_name}")


def _read_text(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return fh.read()
    except OSError as exc:
        raise ManifestIOError(f"Failed to read {path}: {exc}") from exc


def _string_map(data: Dict[str, Any], key: str, file_name: str) -> Dict[str, str]:
    """Validate the flat string-to-string mapping under ``key``, keeping source order.

    An absent key is an empty mapping; a key that is present must hold an
    object, so ``null`` is rejected like any other non-object value.
    """
    if key not in data:
        return {}
    value = data[key]
    if not isinstance(value, dict):
        found = "null" if value is None else type(value).__name__
        raise ConfigError(
            f'Malformed "{key}" configuration in {file_name}: expected an object, '
            f"found {found}"
        )
    out: Dict[str, str] = {}
    for name, specifier in value.items():
        if not isinstance(specifier, str):
            raise ConfigError(
                f'Malformed "{key}" configuration in {file_name}: value for "{name}" is not a string'
            )
        out[str(name)] = specifier
    return out


@dataclass
class DenoConfig:
    """A deno.json or deno.jsonc file."""
    path: str
    format: DenoConfigFormat
    json: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: str) -> "DenoConfig":
        """Read and parse a native config (comments and trailing commas allowed).

        Uses the same JSONC grammar as the patcher, so a file accepted here
        can also be updated.
        """
        fmt = DenoConfigFormat.from_path(path)
        text = _read_text(path)
        if not text.strip():
            return cls(path=path, format=fmt, json={})
        try:
            data = to_python(parse_to_ast(text).value)
        except JsoncParseError as exc:
            raise ConfigError(f"Failed to parse {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Failed to parse {path}: top level is not an object")
        return cls(path=path, format=fmt, json=data)

    def existing_imports(self) -> Dict[str, str]:
        """Returns the existing imports from the config."""
        return _string_map(self.json, self.imports_key(), self.file_name())

    def fmt_options(self) -> FmtOptions:
        return FmtOptions.from_config(self.json.get("fmt"))

    def imports_key(self) -> str:
        return "imports"

    def file_name(self) -> str:
        return self.format.value

    def is_npm(self) -> bool:
        return False


@dataclass
class PackageJson:
    """A package.json file; only used when future features are enabled."""
    path: str
    json: Dict[str, Any] = field(default_factory=dict)
    fmt: Optional[FmtOptions] = None

    @classmethod
    def load(cls, path: str) -> "PackageJson":
        """Read and parse a package.json (strict JSON)."""
        text = _read_text(path)
        if not text.strip():
            return cls(path=path, json={})
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Failed to parse {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Failed to parse {path}: top level is not an object")
        return cls(path=path, json=data)

    def existing_imports(self) -> Dict[str, str]:
        """Returns the existing dependencies from the manifest."""
        return _string_map(self.json, self.imports_key(), self.file_name())

    def fmt_options(self) -> FmtOptions:
        return self.fmt or FmtOptions()

    def imports_key(self) -> str:
        return "dependencies"

    def file_name(self) -> str:
        return Constants.PACKAGE_JSON_FILE

    def is_npm(self) -> bool:
        return True


Manifest = Union[DenoConfig, PackageJson]
