"""Canonical identities for documents that can be visualized."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

from graphview.application.ports.resource import ResourceContext
from graphview.errors import IdentityResolutionError

_FILE_SCHEME = "file"


@dataclass(frozen=True, slots=True)
class ResourceIdentity:
    """Comparable key naming one external document."""

    key: str

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("identity key must be non-empty")

    def __str__(self) -> str:
        return self.key

    @classmethod
    def from_uri(cls, uri: str) -> ResourceIdentity:
        """Normalize ``uri`` (or a bare absolute path) into an identity.

        Query strings and fragments are ignored. File paths are normalized
        lexically so that documents which do not exist on disk still resolve.
        """

        if not isinstance(uri, str) or not uri.strip():
            raise IdentityResolutionError("document uri must be a non-empty string")
        raw = uri.strip()
        parts = urlsplit(raw)
        scheme = parts.scheme.lower()
        if not scheme:
            scheme = _FILE_SCHEME
            path = raw
        else:
            path = unquote(parts.path)

        if not path:
            raise IdentityResolutionError(f"document uri {uri!r} has no path component")

        normalized = posixpath.normpath(path)
        if scheme == _FILE_SCHEME:
            if not normalized.startswith("/"):
                raise IdentityResolutionError(f"document path {path!r} is not absolute")
            # normpath keeps a leading "//" (POSIX implementation-defined); collapse it
            if normalized.startswith("//"):
                normalized = "/" + normalized.lstrip("/")
            return cls(normalized)
        return cls(f"{scheme}:{normalized}")


def resolve_identity(context: ResourceContext | None) -> ResourceIdentity:
    """Return the identity of the document behind ``context``."""

    if context is None:
        raise IdentityResolutionError("Could not get active text editor for state machine render.")
    uri = getattr(context, "uri", None)
    if uri is None:
        raise IdentityResolutionError("resource context does not expose a document uri")
    return ResourceIdentity.from_uri(uri)


__all__ = ["ResourceIdentity", "resolve_identity"]
