"""Parsing of container image references (``[domain/]path[:tag][@digest]``)."""

from __future__ import annotations

import re
from dataclasses import dataclass

NAME_TOTAL_LENGTH_MAX = 255

_ALPHA_NUMERIC = r"[a-z0-9]+"
# A separator that may be empty only joins two alphanumeric runs into one,
# so it is written here without the empty alternative.
_SEPARATOR = r"(?:[._]|__|-+)"
_NAME_COMPONENT = _ALPHA_NUMERIC + r"(?:" + _SEPARATOR + _ALPHA_NUMERIC + r")*"
_DOMAIN_COMPONENT = r"(?:[a-zA-Z0-9]|[a-zA-Z0-9][a-zA-Z0-9-]*[a-zA-Z0-9])"
_DOMAIN = _DOMAIN_COMPONENT + r"(?:\." + _DOMAIN_COMPONENT + r")*(?::[0-9]+)?"
_TAG = r"\w[\w.-]{0,127}"
_DIGEST = r"[A-Za-z][A-Za-z0-9]*(?:[-_+.][A-Za-z][A-Za-z0-9]*)*:[0-9a-fA-F]{32,}"
_PATH = _NAME_COMPONENT + r"(?:/" + _NAME_COMPONENT + r")*"
_NAME = r"(?:" + _DOMAIN + r"/)?" + _PATH

_REFERENCE_RE = re.compile(
    r"(" + _NAME + r")(?::(" + _TAG + r"))?(?:@(" + _DIGEST + r"))?", re.ASCII
)
_ANCHORED_NAME_RE = re.compile(r"(?:(" + _DOMAIN + r")/)?(" + _PATH + r")", re.ASCII)
_ENCODED_DIGEST_RE = re.compile(r"[a-f0-9]+")
_DIGEST_HEX_LENGTHS = {"sha256": 64, "sha384": 96, "sha512": 128}


class ReferenceError(ValueError):
    """An image reference could not be parsed."""


@dataclass(frozen=True)
class Reference:
    """A parsed image reference."""

    domain: str = ""
    path: str = ""
    tag: str = ""
    digest: str = ""

    @property
    def name(self) -> str:
        """Repository name, including the domain if there is one."""
        return f"{self.domain}/{self.path}" if self.domain else self.path

    def __str__(self) -> str:
        text = self.name
        if self.tag:
            text += ":" + self.tag
        if self.digest:
            text += "@" + self.digest
        return text


def _validate_digest(digest: str) -> None:
    algorithm, _, encoded = digest.partition(":")
    if not algorithm or not encoded:
        raise ReferenceError("invalid checksum digest format")
    expected = _DIGEST_HEX_LENGTHS.get(algorithm)
    if expected is None:
        raise ReferenceError("unsupported digest algorithm")
    if len(encoded) != expected:
        raise ReferenceError("invalid checksum digest length")
    if not _ENCODED_DIGEST_RE.fullmatch(encoded):
        raise ReferenceError("invalid checksum digest format")


def parse_reference(ref: str) -> Reference:
    """Parse ``ref`` into its parts, raising ReferenceError if it is malformed."""
    match = _REFERENCE_RE.fullmatch(ref)
    if match is None:
        if ref == "":
            raise ReferenceError("repository name must have at least one component")
        if _REFERENCE_RE.fullmatch(ref.lower()) is not None:
            raise ReferenceError(
                "invalid reference format: repository name must be lowercase"
            )
        raise ReferenceError("invalid reference format")

    name, tag, digest = match.group(1), match.group(2) or "", match.group(3) or ""
    if len(name) > NAME_TOTAL_LENGTH_MAX:
        raise ReferenceError(
            f"repository name must not be more than {NAME_TOTAL_LENGTH_MAX} characters"
        )

    name_match = _ANCHORED_NAME_RE.fullmatch(name)
    if name_match is not None:
        domain, path = name_match.group(1) or "", name_match.group(2)
    else:
        domain, path = "", name

    if digest:
        _validate_digest(digest)
    return Reference(domain=domain, path=path, tag=tag, digest=digest)