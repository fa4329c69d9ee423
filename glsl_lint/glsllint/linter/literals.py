"""Collect string and template literals from JavaScript/TypeScript sources."""

from __future__ import annotations

import logging
import re
from functools import cache

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from glsllint.linter.models import LiteralRecord

logger = logging.getLogger(__name__)

_GRAMMARS = {
    "javascript": tree_sitter_javascript.language,
    "javascriptreact": tree_sitter_javascript.language,
    "typescript": tree_sitter_typescript.language_typescript,
    "typescriptreact": tree_sitter_typescript.language_tsx,
}

STRING_NODE = "string"
TEMPLATE_NODE = "template_string"
SUBSTITUTION_NODE = "template_substitution"
_DELIMITERS = ('"', "'", "`")

_ESCAPE_RE = re.compile(
    r"\\(u[dD][89abAB][0-9a-fA-F]{2}\\u[dD][c-fC-F][0-9a-fA-F]{2}"
    r"|u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])"
)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
    "\n": "",
    "\r": "",
    "\r\n": "",
    "\u2028": "",
    "\u2029": "",
}


class HostParseError(Exception):
    """The host document could not be turned into a syntax tree."""


def supported_languages() -> set[str]:
    return set(_GRAMMARS)


@cache
def _language(language_id: str) -> Language:
    return Language(_GRAMMARS[language_id]())


def _encode(text: str) -> bytes:
    # Lone surrogates cannot be encoded; they become '?'
    return text.encode("utf-8", errors="replace")


def parse_document(text: str, language_id: str) -> Tree:
    """Parse a host document with the tree-sitter grammar for its language."""
    if language_id not in _GRAMMARS:
        raise HostParseError(f"No grammar for language '{language_id}'")
    try:
        parser = Parser(_language(language_id))
        return parser.parse(_encode(text))
    except (ValueError, TypeError) as e:
        raise HostParseError(f"Failed to parse {language_id} document: {e}") from e


def _unescape(raw: str) -> str:
    def replace(match: re.Match[str]) -> str:
        seq = match.group(1)
        if seq in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[seq]
        if len(seq) == 11:
            # high then low surrogate escape: one astral character
            high, low = int(seq[1:5], 16), int(seq[7:], 16)
            return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))
        if seq.startswith("u{"):
            return _char(int(seq[2:-1], 16))
        if seq[0] in "ux" and len(seq) > 1:
            return _char(int(seq[1:], 16))
        return seq

    return _ESCAPE_RE.sub(replace, raw)


def _char(code: int) -> str:
    # Unpaired surrogates cannot be encoded, so they become U+FFFD
    if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
        return "\ufffd"
    return chr(code)


def _is_literal(node: Node) -> bool:
    if not node.is_named:
        return False
    if node.type == STRING_NODE:
        return True
    if node.type == TEMPLATE_NODE:
        return not any(child.type == SUBSTITUTION_NODE for child in node.children)
    return False


def _is_delimiter(node: Node) -> bool:
    return not node.is_named and node.type in _DELIMITERS


def content_span(node: Node) -> tuple[int, int]:
    """Byte span of a literal's content, without its quotes.

    A literal cut short by error recovery may lack its closing delimiter (or
    carry a zero-width missing one); its content then runs to the node's end.
    """
    start, end = node.start_byte, node.end_byte
    children = node.children
    if children and _is_delimiter(children[0]):
        start = children[0].end_byte
    if len(children) > 1 and _is_delimiter(children[-1]):
        end = children[-1].start_byte
    return start, max(start, end)


def extract_literals(tree: Tree, source: bytes) -> list[LiteralRecord]:
    """Return every plain string and substitution-free template literal.

    Walks the whole tree with an explicit stack, so literals nested anywhere
    (call arguments, object values, substitutions of other templates) are
    found, in document order.
    """
    literals: list[LiteralRecord] = []
    stack: list[Node] = [tree.root_node]
    while stack:
        node = stack.pop()
        if _is_literal(node):
            start, end = content_span(node)
            raw = source[start:end].decode("utf-8", errors="replace")
            literals.append(
                LiteralRecord(text=_unescape(raw), start_line=node.start_point.row)
            )
            continue
        stack.extend(reversed(node.children))
    return literals


def literals_from_text(text: str, language_id: str) -> list[LiteralRecord]:
    """Parse ``text`` and extract its literals. Raises HostParseError."""
    tree = parse_document(text, language_id)
    literals = extract_literals(tree, _encode(text))
    logger.debug("Extracted %d literals from %s document", len(literals), language_id)
    return literals
