"""Placeholder resolution: turn a parsed template plus answers into a command."""

from typing import Callable, Dict, List

from bsh.template import Placeholder, Segment, parse

PromptFn = Callable[[str], str]


def resolve(segments: List[Segment], prompt_fn: PromptFn) -> str:
    """Substitute every placeholder with a value obtained from *prompt_fn*.

    *prompt_fn* is called once per distinct identifier, in first-occurrence
    order. Values are inserted verbatim; no shell quoting is applied.
    """
    values: Dict[str, str] = {}
    parts = []
    for segment in segments:
        if isinstance(segment, Placeholder):
            if segment.identifier not in values:
                values[segment.identifier] = prompt_fn(segment.identifier)
            parts.append(values[segment.identifier])
        else:
            parts.append(segment.text)
    return "".join(parts)


def resolve_template(raw: str, prompt_fn: PromptFn) -> str:
    return resolve(parse(raw), prompt_fn)
