"""Token parsing utilities for package identifiers given on the command line."""

import re
from typing import Optional, Tuple

import semantic_version

from constants import Registries
from common.errors import PackageParseError
from .models import AddPackageReq, PackageReq

_JSR_NAME_RE = re.compile(r"^@[a-z0-9][a-z0-9-]*/[a-z0-9][a-z0-9-]*$")
_NPM_NAME_RE = re.compile(r"^(?:@[a-z0-9~][a-z0-9._~-]*/)?[a-z0-9~][a-z0-9._~-]*$", re.IGNORECASE)
_NPM_TAG_RE = re.compile(r"^[A-Za-z][A-Za-z0-9._-]*$")


def split_name_and_version(text: str) -> Tuple[str, Optional[str]]:
    """Split ``name[@constraint]``; the leading ``@`` of a scope is part of the name."""
    start = 1 if text.startswith("@") else 0
    at = text.find("@", start)
    if at == -1:
        return text, None
    return text[:at], text[at + 1:]


def strip_sub_path(name: str, version: Optional[str]) -> Tuple[str, Optional[str]]:
    """Drop a module sub path (``@std/path@1/posix``, ``chalk/source``).

    The sub path follows the version when one is given, otherwise the package
    name (``@scope/name`` or ``name``).
    """
    if version is not None:
        return name, version.split("/", 1)[0]
    keep = 2 if name.startswith("@") else 1
    return "/".join(name.split("/")[:keep]), None


def is_valid_range(text: str) -> bool:
    """Return True when ``text`` parses as an npm-style version range."""
    try:
        semantic_version.NpmSpec(text)
    except ValueError:
        return False
    return True


def is_dist_tag(text: str) -> bool:
    """Return True for npm dist-tag shaped constraints such as ``next``."""
    return bool(_NPM_TAG_RE.match(text)) and not is_valid_range(text)


def _parse_req(registry: Registries, raw: str, body: str) -> PackageReq:
    """Validate ``body`` (prefix stripped) against the registry grammar."""
    name, version = strip_sub_path(*split_name_and_version(body.strip()))
    if not name:
        raise PackageParseError(raw, "missing package name")

    if registry == Registries.JSR:
        if not _JSR_NAME_RE.match(name):
            raise PackageParseError(raw, "JSR packages must be named @scope/name")
    elif not _NPM_NAME_RE.match(name):
        raise PackageParseError(raw, "invalid npm package name")

    if version is None:
        return PackageReq(name=name)
    version = version.strip()
    if not version:
        raise PackageParseError(raw, "empty version constraint")
    if is_valid_range(version):
        return PackageReq(name=name, version_text=version)
    if registry == Registries.NPM and is_dist_tag(version):
        return PackageReq(name=name, version_text=version)
    raise PackageParseError(raw, f"invalid version constraint '{version}'")


def parse_add_token(token: str) -> AddPackageReq:
    """Classify a raw identifier and parse it into a typed requirement.

    ``npm:``-prefixed tokens are npm requirements; everything else is a JSR
    requirement, with an optional ``jsr:`` prefix.
    """
    npm_prefix = f"{Registries.NPM.value}:"
    jsr_prefix = f"{Registries.JSR.value}:"
    if token.startswith(npm_prefix):
        registry = Registries.NPM
        body = token[len(npm_prefix):]
    else:
        registry = Registries.JSR
        body = token[len(jsr_prefix):] if token.startswith(jsr_prefix) else token
    return AddPackageReq(registry=registry, req=_parse_req(registry, token, body))
