"""
Command template parsing.

A template is plain shell text with named slots written as ``<[name]>``.
Repeated names refer to the same slot.
"""

from dataclasses import dataclass
from typing import List, Union

from bsh.errors import MalformedTemplate

OPEN = "<["
CLOSE = "]>"


@dataclass(frozen=True)
class Literal:
    """Verbatim text between placeholders."""
    text: str


@dataclass(frozen=True)
class Placeholder:
    """A named slot filled in at run time."""
    identifier: str


Segment = Union[Literal, Placeholder]


def parse(raw: str) -> List[Segment]:
    """Split a raw template into literal and placeholder segments.

    Raises MalformedTemplate for an open marker without a close marker
    or for an empty identifier. Nothing is salvaged from a bad template.
    """
    segments: List[Segment] = []
    pos = 0
    while True:
        start = raw.find(OPEN, pos)
        if start == -1:
            break
        end = raw.find(CLOSE, start + len(OPEN))
        nested = raw.find(OPEN, start + len(OPEN))
        if end == -1 or (nested != -1 and nested < end):
            raise MalformedTemplate(
                f"Unterminated placeholder at position {start}: {raw!r}",
                template=raw,
                position=start,
            )
        identifier = raw[start + len(OPEN):end]
        if not identifier.strip():
            raise MalformedTemplate(
                f"Empty placeholder at position {start}: {raw!r}",
                template=raw,
                position=start,
            )
        if start > pos:
            segments.append(Literal(raw[pos:start]))
        segments.append(Placeholder(identifier))
        pos = end + len(CLOSE)

    if pos < len(raw):
        segments.append(Literal(raw[pos:]))
    return segments


def render(segments: List[Segment]) -> str:
    """Serialize segments back into template text."""
    parts = []
    for segment in segments:
        if isinstance(segment, Placeholder):
            parts.append(f"{OPEN}{segment.identifier}{CLOSE}")
        else:
            parts.append(segment.text)
    return "".join(parts)


def placeholders(segments: List[Segment]) -> List[str]:
    """Distinct placeholder identifiers in first-occurrence order."""
    return list(dict.fromkeys(
        segment.identifier for segment in segments if isinstance(segment, Placeholder)
    ))


def validate(raw: str) -> None:
    """Raise MalformedTemplate if *raw* does not parse."""
    parse(raw)
