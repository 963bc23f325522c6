from __future__ import annotations

import pytest

from graphview.domain.identity import ResourceIdentity, resolve_identity
from graphview.errors import IdentityResolutionError
from tests.fixtures.fakes import FakeDocument


def test_same_path_resolves_to_equal_identity() -> None:
    first = resolve_identity(FakeDocument("/a/b.json"))
    second = resolve_identity(FakeDocument("/a/b.json"))

    assert first == second
    assert hash(first) == hash(second)


def test_different_paths_never_collide() -> None:
    assert resolve_identity(FakeDocument("/a/b.json")) != resolve_identity(FakeDocument("/a/c.json"))


@pytest.mark.parametrize(
    "uri",
    [
        "/a/b.json",
        "/a/./b.json",
        "/a/x/../b.json",
        "//a//b.json",
        "file:///a/b.json",
        "FILE:///a/b.json",
        "file:///a/b.json?version=2#L10",
    ],
)
def test_equivalent_references_normalize_to_one_identity(uri: str) -> None:
    assert ResourceIdentity.from_uri(uri) == ResourceIdentity("/a/b.json")


def test_percent_escapes_are_decoded_for_file_uris() -> None:
    identity = ResourceIdentity.from_uri("file:///state%20machines/flow.asl.json")

    assert identity.key == "/state machines/flow.asl.json"


def test_non_file_schemes_are_kept_apart_from_disk_paths() -> None:
    untitled = ResourceIdentity.from_uri("untitled:Untitled-1")

    assert untitled.key == "untitled:Untitled-1"
    assert untitled != ResourceIdentity.from_uri("/Untitled-1")


@pytest.mark.parametrize("uri", ["", "   ", "relative/path.json", "file://host"])
def test_unusable_uris_raise(uri: str) -> None:
    with pytest.raises(IdentityResolutionError):
        ResourceIdentity.from_uri(uri)


def test_missing_context_raises() -> None:
    with pytest.raises(IdentityResolutionError, match="active text editor"):
        resolve_identity(None)


def test_context_without_uri_raises() -> None:
    with pytest.raises(IdentityResolutionError):
        resolve_identity(object())  # type: ignore[arg-type]


def test_identity_renders_as_key() -> None:
    assert str(ResourceIdentity("/a/b.json")) == "/a/b.json"
