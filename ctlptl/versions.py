"""Semantic versions, parsed tolerantly as tools report them."""

from __future__ import annotations

import string
from dataclasses import dataclass
from functools import total_ordering
from typing import Union

_DIGITS = frozenset(string.digits)
_ALPHANUM = frozenset(string.ascii_letters + string.digits + "-")

Identifier = Union[int, str]


def _only(text: str, chars: frozenset[str]) -> bool:
    return all(c in chars for c in text)


def _has_leading_zero(text: str) -> bool:
    return len(text) > 1 and text[0] == "0"


def _cmp(a: object, b: object) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


def _compare_identifiers(a: Identifier, b: Identifier) -> int:
    if isinstance(a, int) and isinstance(b, int):
        return _cmp(a, b)
    if isinstance(a, int):
        return -1
    if isinstance(b, int):
        return 1
    return _cmp(a, b)


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A semantic version. Build metadata does not affect ordering or equality."""

    major: int
    minor: int = 0
    patch: int = 0
    pre: tuple[Identifier, ...] = ()
    build: tuple[str, ...] = ()

    def _compare(self, other: Version) -> int:
        for mine, theirs in ((self.major, other.major), (self.minor, other.minor), (self.patch, other.patch)):
            if mine != theirs:
                return _cmp(mine, theirs)
        if not self.pre and not other.pre:
            return 0
        if not self.pre:
            return 1
        if not other.pre:
            return -1
        for mine, theirs in zip(self.pre, other.pre):
            result = _compare_identifiers(mine, theirs)
            if result:
                return result
        return _cmp(len(self.pre), len(other.pre))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) < 0

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.pre))

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += "-" + ".".join(str(p) for p in self.pre)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


def _number(text: str, label: str) -> int:
    if not _only(text, _DIGITS):
        raise ValueError(f"invalid character(s) found in {label} number {text!r}")
    if _has_leading_zero(text):
        raise ValueError(f"{label} number must not contain leading zeroes {text!r}")
    if not text:
        raise ValueError(f"{label} number is empty")
    return int(text)


def _prerelease(text: str) -> Identifier:
    if not text:
        raise ValueError("prerelease is empty")
    if _only(text, _DIGITS):
        if _has_leading_zero(text):
            raise ValueError(f"numeric prerelease must not contain leading zeroes {text!r}")
        return int(text)
    if _only(text, _ALPHANUM):
        return text
    raise ValueError(f"invalid character(s) found in prerelease {text!r}")


def _parse(text: str) -> Version:
    if not text:
        raise ValueError("version string empty")
    parts = text.split(".", 2)
    if len(parts) != 3:
        raise ValueError("no Major.Minor.Patch elements found")
    major = _number(parts[0], "major")
    minor = _number(parts[1], "minor")

    rest, plus, build_text = parts[2].partition("+")
    build = tuple(build_text.split(".")) if plus else ()
    rest, dash, pre_text = rest.partition("-")
    pre = tuple(_prerelease(p) for p in pre_text.split(".")) if dash else ()
    patch = _number(rest, "patch")

    for item in build:
        if not item:
            raise ValueError("build meta data is empty")
        if not _only(item, _ALPHANUM):
            raise ValueError(f"invalid character(s) found in build meta data {item!r}")
    return Version(major, minor, patch, pre, build)


def parse_tolerant(text: str) -> Version:
    """Parse a version, allowing a ``v`` prefix, leading zeroes and a missing minor or patch.

    Raises ValueError if the text is not a version.
    """
    text = text.strip()
    if text.startswith("v"):
        text = text[1:]
    parts = []
    for part in text.split(".", 2):
        if len(part) > 1:
            part = part.lstrip("0")
            if not part or part[0] not in _DIGITS:
                part = "0" + part
        parts.append(part)
    if len(parts) < 3:
        if "+" in parts[-1] or "-" in parts[-1]:
            raise ValueError("short version cannot contain prerelease/build meta data")
        parts.extend(["0"] * (3 - len(parts)))
    return _parse(".".join(parts))