"""Version resolvers for the supported registries."""

from .base import VersionResolver
from .jsr import JsrVersionResolver
from .npm import NpmVersionResolver

__all__ = [
    "VersionResolver",
    "JsrVersionResolver",
    "NpmVersionResolver",
]
