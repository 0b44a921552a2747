"""Manifest discovery, JSONC parsing, formatting and patching."""
