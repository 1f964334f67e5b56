"""Tolerant scanner for generator-produced plan markup.

Language models wrap the ``<plan>`` block in prose, code fences and other
chatter, so the scanner looks for the first ``<plan`` start tag, reads exactly
one balanced element from there and ignores whatever surrounds it. Inside the
block the rules are strict: every tag must be terminated and balanced, every
attribute must carry a quoted value and appear at most once per element.

The result is an arena: a flat tuple of immutable ``Element`` nodes that refer
to each other by index. Node 0 is a synthetic ``#document`` node whose only
child is the plan element.
"""

from __future__ import annotations

import logging
import re
from bisect import bisect_right
from dataclasses import dataclass, field

from planner.errors import DuplicateAttributeError, MalformedDocumentError

logger = logging.getLogger("sp.tokenizer")

DOCUMENT_TAG = "#document"
PLAN_TAG = "plan"

_PLAN_START = re.compile(rf"<{PLAN_TAG}(?=[\s/>])")
_TAG_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_.\-]*")
_ATTRIBUTE_NAME = re.compile(r"[A-Za-z_:][A-Za-z0-9_.:\-]*")
_NEWLINE = re.compile(r"\n")
_CLOSING_TAG = re.compile(r"</\s*([^\s>]*)\s*>")
_ATTRIBUTE_HEAD = re.compile(r"([^\s=/>\"']+)\s*(=)?\s*")
_ENTITY = re.compile(r"&(#x[0-9a-fA-F]+|#[0-9]+|lt|gt|amp|quot|apos);")
_NAMED_ENTITIES = {"lt": "<", "gt": ">", "amp": "&", "quot": '"', "apos": "'"}
_MAX_CODEPOINT = 0x10FFFF


def _replace_entity(match: re.Match[str]) -> str:
    ref = match.group(1)
    if ref in _NAMED_ENTITIES:
        return _NAMED_ENTITIES[ref]
    codepoint = int(ref[2:], 16) if ref.startswith("#x") else int(ref[1:])
    if 0 < codepoint <= _MAX_CODEPOINT:
        return chr(codepoint)
    return match.group(0)


def unescape_markup(text: str) -> str:
    """Resolve the predefined XML entities and numeric references only."""
    if "&" not in text:
        return text
    return _ENTITY.sub(_replace_entity, text)


def escape_attribute(value: str) -> str:
    """Inverse of ``unescape_markup`` for a double-quoted attribute value."""
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


@dataclass(frozen=True)
class Element:
    """One node of the parsed tree."""

    index: int
    tag: str
    attributes: tuple[tuple[str, str], ...] = ()
    children: tuple[int, ...] = ()
    parent: int | None = None
    text: str = ""
    line: int = 1
    column: int = 1

    def attribute_names(self) -> list[str]:
        return [name for name, _ in self.attributes]


@dataclass(frozen=True)
class ElementTree:
    """Arena of elements; node 0 is the document root."""

    nodes: tuple[Element, ...]

    @property
    def document(self) -> Element:
        return self.nodes[0]

    @property
    def plan(self) -> Element:
        return self.nodes[self.document.children[0]]

    def children_of(self, element: Element) -> list[Element]:
        return [self.nodes[index] for index in element.children]


@dataclass
class _PendingNode:
    tag: str
    parent: int | None
    line: int
    column: int
    attributes: list[tuple[str, str]] = field(default_factory=list)
    children: list[int] = field(default_factory=list)
    text: list[str] = field(default_factory=list)


class _Scanner:
    """Single-use scanner over one document string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pending: list[_PendingNode] = [_PendingNode(tag=DOCUMENT_TAG, parent=None, line=1, column=1)]
        self.open_stack: list[int] = [0]
        self.line_starts: list[int] = [0] + [m.end() for m in _NEWLINE.finditer(text)]

    def position(self, offset: int) -> tuple[int, int]:
        line = bisect_right(self.line_starts, offset)
        return line, offset - self.line_starts[line - 1] + 1

    def fail(self, message: str, offset: int) -> MalformedDocumentError:
        line, column = self.position(offset)
        return MalformedDocumentError(message, line=line, column=column)

    def run(self) -> ElementTree:
        start = _PLAN_START.search(self.text)
        if start is None:
            raise MalformedDocumentError("No <plan> element found in document.")
        if start.start() > 0:
            logger.debug("Skipping %d characters before <plan>", start.start())

        cursor = start.start()
        while True:
            cursor = self._step(cursor)
            if len(self.open_stack) == 1:
                break
            if cursor >= len(self.text):
                node = self.pending[self.open_stack[-1]]
                raise MalformedDocumentError(
                    f"Element <{node.tag}> is never closed.", line=node.line, column=node.column
                )

        trailing = self.text[cursor:].strip()
        if trailing:
            logger.debug("Ignoring %d characters after </plan>", len(trailing))
        return self._freeze()

    def _step(self, cursor: int) -> int:
        text = self.text
        if text[cursor] != "<":
            end = text.find("<", cursor)
            end = len(text) if end == -1 else end
            self.pending[self.open_stack[-1]].text.append(unescape_markup(text[cursor:end]))
            return end
        if text.startswith("<!--", cursor):
            end = text.find("-->", cursor + 4)
            if end == -1:
                raise self.fail("Unterminated comment.", cursor)
            return end + 3
        if text.startswith("<![CDATA[", cursor):
            end = text.find("]]>", cursor + 9)
            if end == -1:
                raise self.fail("Unterminated CDATA section.", cursor)
            self.pending[self.open_stack[-1]].text.append(text[cursor + 9:end])
            return end + 3
        if text.startswith("<?", cursor):
            end = text.find("?>", cursor + 2)
            if end == -1:
                raise self.fail("Unterminated processing instruction.", cursor)
            return end + 2
        if text.startswith("</", cursor):
            return self._close_tag(cursor)
        return self._open_tag(cursor)

    def _close_tag(self, cursor: int) -> int:
        match = _CLOSING_TAG.match(self.text, cursor)
        if match is None:
            raise self.fail("Unterminated closing tag.", cursor)
        tag = match.group(1)
        current = self.pending[self.open_stack[-1]]
        if tag != current.tag:
            raise self.fail(f"Closing tag </{tag}> does not match open element <{current.tag}>.", cursor)
        self.open_stack.pop()
        return match.end()

    def _open_tag(self, cursor: int) -> int:
        text = self.text
        name_match = _TAG_NAME.match(text, cursor + 1)
        if name_match is None:
            raise self.fail("Invalid tag name.", cursor)
        tag = name_match.group(0)
        line, column = self.position(cursor)
        parent = self.open_stack[-1]
        node = _PendingNode(tag=tag, parent=parent, line=line, column=column)

        pos = name_match.end()
        while True:
            stripped = pos
            while stripped < len(text) and text[stripped].isspace():
                stripped += 1
            if stripped >= len(text):
                raise self.fail(f"Unterminated tag <{tag}>.", cursor)
            if text.startswith("/>", stripped):
                self._attach(node)
                return stripped + 2
            if text[stripped] == ">":
                self.open_stack.append(self._attach(node))
                return stripped + 1
            if stripped == pos:
                raise self.fail(f"Invalid character in tag <{tag}>.", stripped)
            pos = self._attribute(node, stripped, cursor)

    def _attribute(self, node: _PendingNode, pos: int, tag_start: int) -> int:
        text = self.text
        head = _ATTRIBUTE_HEAD.match(text, pos)
        if head is None:
            raise self.fail(f"Invalid attribute in tag <{node.tag}>.", pos)
        name = head.group(1)
        if not _ATTRIBUTE_NAME.fullmatch(name):
            raise self.fail(f"Invalid attribute name '{name}' on <{node.tag}>.", pos)
        if head.group(2) is None:
            raise self.fail(f"Attribute '{name}' on <{node.tag}> has no value.", pos)
        quote_at = head.end()
        if quote_at >= len(text):
            raise self.fail(f"Unterminated tag <{node.tag}>.", tag_start)
        quote = text[quote_at]
        if quote not in "\"'":
            raise self.fail(f"Value of attribute '{name}' on <{node.tag}> must be quoted.", quote_at)
        end = text.find(quote, quote_at + 1)
        if end == -1:
            raise self.fail(f"Unterminated tag <{node.tag}>.", tag_start)
        if any(existing == name for existing, _ in node.attributes):
            line, column = self.position(pos)
            raise DuplicateAttributeError(
                f"Attribute '{name}' appears more than once on <{node.tag}>.", line=line, column=column
            )
        node.attributes.append((name, unescape_markup(text[quote_at + 1:end])))
        return end + 1

    def _attach(self, node: _PendingNode) -> int:
        index = len(self.pending)
        self.pending.append(node)
        self.pending[node.parent].children.append(index)
        return index

    def _freeze(self) -> ElementTree:
        nodes = tuple(
            Element(
                index=index,
                tag=node.tag,
                attributes=tuple(node.attributes),
                children=tuple(node.children),
                parent=node.parent,
                text="".join(node.text),
                line=node.line,
                column=node.column,
            )
            for index, node in enumerate(self.pending)
        )
        return ElementTree(nodes=nodes)


def tokenize_document(text: str) -> ElementTree:
    """Scan ``text`` into an element tree rooted at the first ``<plan>`` element."""
    return _Scanner(text or "").run()
