"""Block markup parser.

Block text is plain text with two kinds of markers:

- ``{{key}}``: a scalar placeholder.
- ``{{#each group sep="..."}}body{{/each}}``: a repeat group. The body is
  rendered once per item of the named list and the renderings are joined
  with ``sep`` (default: one newline).

A newline right after the opening marker and right before the closing marker
belongs to the markup, so markers can sit on their own lines:

    INPUTS:
    {{#each inputs}}
    - {{display_name}}
    {{/each}}

Tags starting with ``#`` or ``/`` are reserved for this grammar. Anything other
than ``{{#each ...}}`` and ``{{/each}}`` with those prefixes is a syntax error,
not literal text.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from prompt_assembler.strategies.template_engine.errors import TemplateSyntaxError

_TAG_RE = re.compile(r"\{\{\s*(?P<body>[^{}]*?)\s*\}\}")
_OPEN_RE = re.compile(
    r'^#each\s+(?P<group>[A-Za-z_][A-Za-z0-9_]*)'
    r'(?:\s+sep\s*=\s*"(?P<sep>(?:[^"\\]|\\.)*)")?$'
)
_ESCAPE_RE = re.compile(r"\\(.)")
_ESCAPES = {"n": "\n", "t": "\t"}

DEFAULT_SEPARATOR = "\n"


@dataclass(frozen=True)
class Text:
    """Literal text, emitted unchanged."""

    text: str


@dataclass(frozen=True)
class Placeholder:
    """A ``{{key}}`` marker.

    Attributes:
        key: The stripped key between the braces.
        source: The marker exactly as written, used when the key is unknown.
    """

    key: str
    source: str


@dataclass(frozen=True)
class Group:
    """A repeat group.

    Attributes:
        name: Name of the repeatable list.
        separator: Text placed between rendered items.
        body: Parsed item body (markup newlines already trimmed).
        source: The full group markup as written.
        line: Line of the opening marker, 1-based.
    """

    name: str
    separator: str
    body: tuple["Node", ...]
    source: str
    line: int


Node = Text | Placeholder | Group


@dataclass
class _OpenGroup:
    name: str
    separator: str
    start: int
    line: int
    body: list[Node] = field(default_factory=list)


def _unescape(value: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), value)


def _parse_open_marker(body: str, line: int) -> tuple[str, str]:
    match = _OPEN_RE.match(body)
    if match is None:
        raise TemplateSyntaxError(f"Malformed repeat-group marker '{{{{{body}}}}}'", line)
    sep = match.group("sep")
    return match.group("group"), DEFAULT_SEPARATOR if sep is None else _unescape(sep)


def _trim_body(body: list[Node]) -> tuple[Node, ...]:
    """Drop the single markup newline at each end of a group body."""
    nodes = list(body)
    if nodes and isinstance(nodes[0], Text) and nodes[0].text.startswith("\n"):
        rest = nodes[0].text[1:]
        nodes = ([Text(rest)] if rest else []) + nodes[1:]
    if nodes and isinstance(nodes[-1], Text) and nodes[-1].text.endswith("\n"):
        rest = nodes[-1].text[:-1]
        nodes = nodes[:-1] + ([Text(rest)] if rest else [])
    return tuple(nodes)


def parse_block(text: str) -> list[Node]:
    """Parse block text into a flat list of nodes.

    Args:
        text: Raw block content.

    Returns:
        Nodes in document order. Groups carry their own parsed body.

    Raises:
        TemplateSyntaxError: On nested, unclosed, stray or malformed
            repeat-group markers.
    """
    nodes: list[Node] = []
    open_group: _OpenGroup | None = None
    pos = 0

    for match in _TAG_RE.finditer(text):
        target = open_group.body if open_group is not None else nodes
        if match.start() > pos:
            target.append(Text(text[pos:match.start()]))
        pos = match.end()

        body = match.group("body")
        line = text.count("\n", 0, match.start()) + 1

        if body.startswith("#"):
            if open_group is not None:
                raise TemplateSyntaxError(
                    f"Nested repeat group inside '{open_group.name}' is not supported", line
                )
            name, separator = _parse_open_marker(body, line)
            open_group = _OpenGroup(name=name, separator=separator, start=match.start(), line=line)
        elif body.startswith("/"):
            if body != "/each":
                raise TemplateSyntaxError(f"Unknown closing marker '{{{{{body}}}}}'", line)
            if open_group is None:
                raise TemplateSyntaxError("'{{/each}}' without an open repeat group", line)
            nodes.append(
                Group(
                    name=open_group.name,
                    separator=open_group.separator,
                    body=_trim_body(open_group.body),
                    source=text[open_group.start:match.end()],
                    line=open_group.line,
                )
            )
            open_group = None
        else:
            target.append(Placeholder(key=body, source=match.group(0)))

    if open_group is not None:
        raise TemplateSyntaxError(f"Unclosed repeat group '{open_group.name}'", open_group.line)
    if pos < len(text):
        nodes.append(Text(text[pos:]))
    return nodes


def to_source(nodes: list[Node]) -> str:
    """Serialize parsed nodes back into block text."""
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, Text):
            parts.append(node.text)
        else:
            parts.append(node.source)
    return "".join(parts)


def iter_groups(nodes: list[Node]) -> Iterator[Group]:
    """Yield every repeat group in ``nodes``."""
    for node in nodes:
        if isinstance(node, Group):
            yield node


def iter_placeholder_keys(nodes: list[Node], *, include_groups: bool = True) -> Iterator[str]:
    """Yield placeholder keys, optionally descending into group bodies."""
    for node in nodes:
        if isinstance(node, Placeholder):
            yield node.key
        elif isinstance(node, Group) and include_groups:
            yield from iter_placeholder_keys(list(node.body))
