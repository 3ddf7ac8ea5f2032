"""Map request paths to catalog type names.

Examples::

    /api/v1/users      -> User, array
    /api/user          -> User, single
    /api/people        -> Person, array
    /v1/user-profiles  -> UserProfile, array
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import NamedTuple
from urllib.parse import urlsplit

import inflect

_SEPARATORS = re.compile(r"[-_]+")
# Singular nouns that inflect would otherwise read as plurals ("address", "status", "analysis").
_SINGULAR_ENDINGS = ("ss", "us", "is")
# Last word of a segment: "Profiles" in "userProfiles", all of "users" or "USERS".
_TRAILING_WORD = re.compile(r"(?:[A-Z]?[a-z]+|[A-Z]+)$")

# Latin and Greek plurals inflect gets wrong.
_IRREGULAR_PLURALS = {
    "indices": "index",
    "vertices": "vertex",
    "matrices": "matrix",
    "appendices": "appendix",
    "radii": "radius",
    "cacti": "cactus",
    "fungi": "fungus",
    "nuclei": "nucleus",
    "stimuli": "stimulus",
    "criteria": "criterion",
    "phenomena": "phenomenon",
    "analyses": "analysis",
    "theses": "thesis",
    "crises": "crisis",
    "diagnoses": "diagnosis",
}

_inflector = inflect.engine()


class ResolvedName(NamedTuple):
    type_name: str
    is_array: bool


def to_pascal_case(value: str) -> str:
    """``"product-item"`` -> ``"ProductItem"``, ``"user"`` -> ``"User"``."""
    return "".join(part[:1].upper() + part[1:] for part in _SEPARATORS.split(value) if part)


def extract_last_segment(path: str) -> str:
    """``"/api/users?page=2"`` -> ``"users"``; root and empty paths give ``""``."""
    route = urlsplit(path).path if "?" in path or "#" in path else path
    segments = [segment for segment in route.split("/") if segment]
    return segments[-1] if segments else ""


@lru_cache(maxsize=1024)
def singularize(word: str) -> str | None:
    """Return the singular form of ``word``, or ``None`` when it is already singular.

    Only the trailing word of a compound (``user-profiles``, ``userProfiles``) is inflected
    and its casing is kept.
    """
    match = _TRAILING_WORD.search(word)
    if match is None:
        return None
    head, tail = word[: match.start()], match.group(0)
    lowered = tail.lower()
    singular = _IRREGULAR_PLURALS.get(lowered)
    if singular is None:
        if lowered.endswith(_SINGULAR_ENDINGS):
            return None
        inflected = _inflector.singular_noun(lowered)
        if inflected is False or _inflector.plural_noun(inflected) != lowered:
            return None
        singular = inflected
    if tail.isupper() and len(tail) > 1:
        singular = singular.upper()
    elif tail[:1].isupper():
        singular = singular[:1].upper() + singular[1:]
    return head + singular


def resolve_segment(segment: str) -> ResolvedName:
    if not segment:
        return ResolvedName("", False)
    singular = singularize(segment)
    if singular is None:
        return ResolvedName(to_pascal_case(segment), False)
    return ResolvedName(to_pascal_case(singular), True)


def resolve(path: str) -> ResolvedName:
    return resolve_segment(extract_last_segment(path))


class URLResolver:
    """Resolver object for injection into the engine; stateless."""

    def resolve(self, path: str) -> ResolvedName:
        return resolve(path)
