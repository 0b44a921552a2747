"""Error taxonomy for the add operation.

Every error carries the process exit code the CLI reports for it.
"""

from __future__ import annotations

from constants import ExitCodes


class DepAddError(Exception):
    """Base class for failures reported to the user."""

    exit_code = ExitCodes.FILE_ERROR


class PackageParseError(DepAddError, ValueError):
    """Raised when a package identifier is not ``name[@constraint]``."""

    exit_code = ExitCodes.PARSE_ERROR

    def __init__(self, raw: str, reason: str = ""):
        self.raw = raw
        self.reason = reason
        msg = f"Failed to parse package required: {raw}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class LookupFailure(DepAddError):
    """Raised when a registry could not be queried (transport or protocol)."""

    exit_code = ExitCodes.CONNECTION_ERROR


class PackageNotFoundError(DepAddError):
    """Raised when a registry has no version matching a requirement."""

    exit_code = ExitCodes.PACKAGE_NOT_FOUND

    def __init__(self, package_name: str):
        self.package_name = package_name
        super().__init__(f"{package_name} was not found.")


class ConfigError(DepAddError):
    """Raised for a missing, unsupported or malformed manifest."""

    exit_code = ExitCodes.CONFIG_ERROR


class RemoteManifestError(ConfigError):
    """Raised when the manifest lives at a non-local location."""


class ManifestIOError(DepAddError):
    """Raised when the manifest cannot be created, read or written."""

    exit_code = ExitCodes.FILE_ERROR
