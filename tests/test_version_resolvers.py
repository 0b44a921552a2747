"""Tests for the JSR and npm version resolvers."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from constants import Registries
from versioning.models import PackageNv, PackageReq
from versioning.resolvers import JsrVersionResolver, NpmVersionResolver
from versioning.resolvers.base import select_preferring_latest

JSR_META = {
    "scope": "std",
    "name": "path",
    "latest": "1.2.0",
    "versions": {
        "1.0.0": {},
        "1.0.4": {},
        "1.2.0": {},
        "1.3.0": {"yanked": True},
    },
}

NPM_PACKUMENT = {
    "name": "left-pad",
    "dist-tags": {"latest": "1.0.3", "next": "2.0.0-beta.1"},
    "versions": {
        "1.0.0": {},
        "1.0.3": {},
        "1.1.0": {},
        "2.0.0-beta.1": {},
    },
}


@pytest.fixture
def jsr_resolver():
    return JsrVersionResolver(None, "https://jsr.io/")


@pytest.fixture
def npm_resolver():
    return NpmVersionResolver(None, "https://registry.npmjs.org")


class TestSelectPreferringLatest:
    """Shared selection helper."""

    def test_latest_wins_when_it_matches(self):
        assert select_preferring_latest("*", ["1.0.0", "1.1.0"], "1.0.0") == "1.0.0"

    def test_highest_match_without_latest(self):
        assert select_preferring_latest("^1.0.0", ["1.0.0", "1.4.2", "2.0.0"], None) == "1.4.2"

    def test_invalid_versions_are_skipped(self):
        assert select_preferring_latest("*", ["not-a-version", "0.1.0"], None) == "0.1.0"

    def test_no_match(self):
        assert select_preferring_latest("^3", ["1.0.0"], None) is None


class TestJsrVersionResolver:
    """JSR metadata handling."""

    def test_registry(self, jsr_resolver):
        assert jsr_resolver.registry == Registries.JSR

    def test_meta_url(self, jsr_resolver):
        assert jsr_resolver.meta_url("@std/path") == "https://jsr.io/@std/path/meta.json"

    def test_pick_defaults_to_latest(self, jsr_resolver):
        assert jsr_resolver.pick(PackageReq("@std/path"), JSR_META) == "1.2.0"

    def test_pick_tilde_range(self, jsr_resolver):
        assert jsr_resolver.pick(PackageReq("@std/path", "~1.0.0"), JSR_META) == "1.0.4"

    def test_yanked_versions_are_never_selected(self, jsr_resolver):
        assert jsr_resolver.pick(PackageReq("@std/path", "1.3.0"), JSR_META) is None

    @patch("versioning.resolvers.jsr.get_json", new_callable=AsyncMock)
    def test_req_to_nv(self, mock_get_json, jsr_resolver):
        mock_get_json.return_value = (200, JSR_META)
        nv = asyncio.run(jsr_resolver.req_to_nv(PackageReq("@std/path", "^1.0.0")))
        assert nv == PackageNv(name="@std/path", version="1.2.0")
        assert mock_get_json.call_args.args[1] == "https://jsr.io/@std/path/meta.json"

    @patch("versioning.resolvers.jsr.get_json", new_callable=AsyncMock)
    def test_req_to_nv_unknown_package(self, mock_get_json, jsr_resolver):
        mock_get_json.return_value = (404, None)
        assert asyncio.run(jsr_resolver.req_to_nv(PackageReq("@std/nope"))) is None


class TestNpmVersionResolver:
    """npm packument handling."""

    def test_registry(self, npm_resolver):
        assert npm_resolver.registry == Registries.NPM

    def test_packument_url_encodes_scope(self, npm_resolver):
        assert npm_resolver.packument_url("@types/node") == "https://registry.npmjs.org/@types%2Fnode"
        assert npm_resolver.packument_url("chalk") == "https://registry.npmjs.org/chalk"

    def test_pick_latest_tag_over_highest(self, npm_resolver):
        assert npm_resolver.pick(PackageReq("left-pad"), NPM_PACKUMENT) == "1.0.3"

    def test_pick_range(self, npm_resolver):
        assert npm_resolver.pick(PackageReq("left-pad", "^1.1"), NPM_PACKUMENT) == "1.1.0"
        assert npm_resolver.pick(PackageReq("left-pad", "~1.0.0"), NPM_PACKUMENT) == "1.0.3"

    def test_pick_dist_tag(self, npm_resolver):
        assert npm_resolver.pick(PackageReq("left-pad", "next"), NPM_PACKUMENT) == "2.0.0-beta.1"
        assert npm_resolver.pick(PackageReq("left-pad", "canary"), NPM_PACKUMENT) is None

    @patch("versioning.resolvers.npm.get_json", new_callable=AsyncMock)
    def test_req_to_nv(self, mock_get_json, npm_resolver):
        mock_get_json.return_value = (200, NPM_PACKUMENT)
        nv = asyncio.run(npm_resolver.req_to_nv(PackageReq("left-pad", "~1.0.0")))
        assert nv == PackageNv(name="left-pad", version="1.0.3")

    @patch("versioning.resolvers.npm.get_json", new_callable=AsyncMock)
    def test_req_to_nv_no_matching_version(self, mock_get_json, npm_resolver):
        mock_get_json.return_value = (200, NPM_PACKUMENT)
        assert asyncio.run(npm_resolver.req_to_nv(PackageReq("left-pad", "^5"))) is None
