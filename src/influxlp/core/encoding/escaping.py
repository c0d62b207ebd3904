"""Escaping rules for line protocol elements.

Each element class reserves a set of characters. Writing prefixes every
reserved character with a backslash. Reading drops a backslash only when it
precedes a reserved character; any other backslash is kept as is.
"""

from enum import Enum

BACKSLASH = "\\"


class ElementKind(Enum):
    """Line protocol element classes with distinct escaping rules."""

    MEASUREMENT = "measurement"
    TAG_KEY = "tag key"
    TAG_VALUE = "tag value"
    FIELD_KEY = "field key"
    FIELD_STRING = "field string value"


RESERVED: dict[ElementKind, frozenset[str]] = {
    ElementKind.MEASUREMENT: frozenset(", "),
    ElementKind.TAG_KEY: frozenset(", ="),
    ElementKind.TAG_VALUE: frozenset(", ="),
    ElementKind.FIELD_KEY: frozenset(", ="),
    ElementKind.FIELD_STRING: frozenset('"\\'),
}

# Byte forms for the reader, which scans raw input
RESERVED_BYTES: dict[ElementKind, frozenset[int]] = {
    kind: frozenset(ord(c) for c in chars) for kind, chars in RESERVED.items()
}

_ESCAPE_TABLES = {
    kind: str.maketrans({c: BACKSLASH + c for c in chars})
    for kind, chars in RESERVED.items()
}


def escape(text: str, kind: ElementKind) -> str:
    """Escape every reserved character of the element class.

    Args:
        text: Raw element text.
        kind: Element class whose rules apply.

    Returns:
        Text safe to embed in a line protocol record.
    """
    return text.translate(_ESCAPE_TABLES[kind])


def unescape(text: str, kind: ElementKind) -> str:
    """Reverse escape() for the element class.

    A backslash before a non-reserved character is preserved literally,
    matching permissive producers.
    """
    if BACKSLASH not in text:
        return text
    reserved = RESERVED[kind]
    out: list[str] = []
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if char == BACKSLASH and i + 1 < length and text[i + 1] in reserved:
            out.append(text[i + 1])
            i += 2
            continue
        out.append(char)
        i += 1
    return "".join(out)
