"""Lightweight structural scan of TypeScript declarations.

This is not a compiler: it looks for top-level ``export interface`` and
``export type X = { ... }`` declarations, splits their bodies into members and
classifies each member's declared type. Cross-file references, generics and
inheritance are never resolved.
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

from contract_proxy.models import FieldDescriptor, FieldKind

logger = logging.getLogger(__name__)

Shape = tuple[str, tuple[FieldDescriptor, ...]]

_IDENT = r"[A-Za-z_$][\w$]*"

_INTERFACE_HEADER = re.compile(
    rf"export\s+(?:default\s+)?(?:declare\s+)?interface\s+(?P<name>{_IDENT})\s*"
    r"(?:<[^{]*?>)?\s*(?:extends\s+[^{]+?)?\s*\{"
)
_TYPE_HEADER = re.compile(rf"export\s+(?:declare\s+)?type\s+(?P<name>{_IDENT})\s*(?:<[^=]*?>)?\s*=\s*\{{")

_MEMBER = re.compile(
    r"^(?:readonly\s+)?(?P<name>[A-Za-z_$][\w$]*|'[^']+'|\"[^\"]+\")\s*(?P<optional>\?)?\s*:\s*(?P<type>.+)$",
    re.DOTALL,
)

# Strings are matched so that comment markers inside them are left alone.
_COMMENT_OR_STRING = re.compile(
    r"""(?P<string>'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|`(?:\\.|[^`\\])*`)"""
    r"|(?P<comment>//[^\n]*|/\*.*?\*/)",
    re.DOTALL,
)

_ABSENT_TYPES = frozenset({"null", "undefined", "void"})
_OBJECT_TYPES = frozenset({"any", "unknown", "object", "Object", "never"})
_DATE_TYPES = frozenset({"Date"})
_ARRAY_GENERIC = re.compile(r"^(?:Readonly)?Array\s*<(?P<element>.+)>$", re.DOTALL)
_NUMERIC_LITERAL = re.compile(r"^-?\d+(?:\.\d+)?$")

_OPENERS = "{[(<"
_CLOSERS = "}])>"


class KindInfo(NamedTuple):
    kind: FieldKind
    is_array: bool = False
    format: str | None = None
    nullable: bool = False
    type_ref: str | None = None
    enum: tuple[str, ...] = ()


def strip_comments(content: str) -> str:
    def _replace(match: re.Match[str]) -> str:
        if match.group("comment") is not None:
            # Keep line structure so member splitting on newlines still works.
            return "\n" * match.group("comment").count("\n") or " "
        return match.group(0)

    return _COMMENT_OR_STRING.sub(_replace, content)


def _is_arrow(text: str, index: int) -> bool:
    return text[index] == ">" and index > 0 and text[index - 1] == "="


def _split_top_level(text: str, separators: str) -> list[str]:
    """Split ``text`` on any of ``separators`` that occur outside brackets."""
    parts: list[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(text):
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS and not _is_arrow(text, index):
            depth = max(depth - 1, 0)
        elif depth == 0 and char in separators:
            parts.append(text[start:index])
            start = index + 1
    parts.append(text[start:])
    return parts


def _split_members(body: str) -> list[str]:
    """Split an interface body into member declarations.

    Members end at ``;`` or ``,``, or at a newline when the type is complete
    (multi-line unions such as ``| 'a'`` on the next line are kept together).
    """
    members: list[str] = []
    depth = 0
    current: list[str] = []
    for index, char in enumerate(body):
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS and not _is_arrow(body, index):
            depth = max(depth - 1, 0)
        elif depth == 0 and char in ";,":
            members.append("".join(current))
            current = []
            continue
        elif depth == 0 and char == "\n":
            pending = "".join(current).strip()
            following = body[index + 1 :].lstrip()
            if pending and not pending.endswith(("|", "&", ":", "=>")) and not following.startswith(("|", "&")):
                members.append(pending)
                current = []
                continue
        current.append(char)
    members.append("".join(current))
    return [member.strip() for member in members if member.strip()]


def _matching_paren(text: str) -> int:
    depth = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return -1


def _strip_parens(text: str) -> str:
    while text.startswith("(") and _matching_paren(text) == len(text) - 1:
        text = text[1:-1].strip()
    return text


def _literal_value(text: str) -> str | None:
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return text[1:-1]
    return None


def _classify_single(text: str) -> KindInfo:
    text = _strip_parens(text.strip())

    if text.endswith("[]"):
        element = text
        while element.endswith("[]"):
            element = element[:-2].strip()
        inner = classify_kind(element)
        return inner._replace(is_array=True, nullable=False)

    array_match = _ARRAY_GENERIC.match(text)
    if array_match:
        inner = classify_kind(array_match.group("element"))
        return inner._replace(is_array=True, nullable=False)

    if text == "string":
        return KindInfo("string")
    if text in ("number", "bigint"):
        return KindInfo("number")
    if text == "boolean":
        return KindInfo("boolean")
    if text in _DATE_TYPES:
        return KindInfo("string", format="date-time")
    if text in _OBJECT_TYPES or text.startswith("{") or text.startswith("Record<"):
        return KindInfo("object")
    literal = _literal_value(text)
    if literal is not None:
        return KindInfo("string", enum=(literal,))
    if _NUMERIC_LITERAL.match(text):
        return KindInfo("number")
    if text in ("true", "false"):
        return KindInfo("boolean")
    if re.fullmatch(_IDENT, text):
        return KindInfo("string", type_ref=text)
    return KindInfo("string")


def classify_kind(type_text: str) -> KindInfo:
    """Classify a declared TypeScript type into a field kind.

    ``null``/``undefined`` branches of a union are dropped and reported through
    ``nullable``; what remains decides the kind. Anything unrecognised is a string.
    """
    text = " ".join(type_text.split())
    if text.startswith("|"):
        text = text[1:].strip()
    if not text:
        return KindInfo("string")

    branches = [branch.strip() for branch in _split_top_level(text, "|")]
    present = [branch for branch in branches if branch and branch not in _ABSENT_TYPES]
    nullable = len(present) != len(branches)

    if not present:
        return KindInfo("string", nullable=nullable)
    if len(present) == 1:
        return _classify_single(present[0])._replace(nullable=nullable)

    infos = [_classify_single(branch) for branch in present]
    if all(info.enum for info in infos):
        return KindInfo("string", nullable=nullable, enum=tuple(value for info in infos for value in info.enum))
    kinds = {info.kind for info in infos}
    if len(kinds) == 1 and not any(info.is_array for info in infos):
        return KindInfo(infos[0].kind, format=infos[0].format, nullable=nullable)
    return KindInfo("string", nullable=nullable)


def _field_from_member(member: str) -> FieldDescriptor | None:
    match = _MEMBER.match(member)
    if match is None:
        # Method signatures, index signatures and call signatures carry no data.
        return None
    name = match.group("name").strip("'\"")
    info = classify_kind(match.group("type"))
    return field_descriptor(name, info, bool(match.group("optional")))


def field_descriptor(name: str, info: KindInfo, optional: bool = False) -> FieldDescriptor:
    return FieldDescriptor(
        name=name,
        kind=info.kind,
        optional=optional or info.nullable,
        is_array=info.is_array,
        format=info.format,
        enum=info.enum,
        type_ref=info.type_ref,
    )


def fields_from_body(body: str) -> tuple[FieldDescriptor, ...]:
    fields = (_field_from_member(member) for member in _split_members(body))
    return tuple(field for field in fields if field is not None)


def _find_closing_brace(text: str, open_index: int) -> int:
    depth = 0
    for index in range(open_index, len(text)):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return -1


class RegexShapeExtractor:
    """Regex-driven shape extractor.

    Implements the ``ShapeExtractor`` protocol.
    """

    name = "regex"

    def extract(self, content: str) -> list[Shape]:
        text = strip_comments(content)
        shapes: list[Shape] = []
        depth = 0
        index = 0
        length = len(text)
        while index < length:
            char = text[index]
            if char in "'\"`":
                literal = _COMMENT_OR_STRING.match(text, index)
                index = literal.end() if literal is not None else index + 1
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth = max(depth - 1, 0)
            elif depth == 0 and char == "e" and (index == 0 or not (text[index - 1].isalnum() or text[index - 1] in "_$")):
                match = _INTERFACE_HEADER.match(text, index) or _TYPE_HEADER.match(text, index)
                if match is not None:
                    open_index = match.end() - 1
                    close_index = _find_closing_brace(text, open_index)
                    if close_index == -1:
                        logger.debug("Unterminated declaration %s", match.group("name"))
                        break
                    shapes.append((match.group("name"), fields_from_body(text[open_index + 1 : close_index])))
                    index = close_index + 1
                    continue
            index += 1
        return shapes
