"""
Text-to-markup rules for the code panel and chat-reply surfaces.

Everything untrusted goes through ``markupsafe.escape``. Functions return
``Markup`` and pass ``Markup`` input through untouched, so running a rule
twice never escapes anything twice.
"""

import re
from typing import Tuple, Union

from markupsafe import Markup, escape

PLACEMENT_LABEL_CLASS = "cl-placement"
INLINE_CODE_CLASS = "cl-inline"
TOKEN_CLASS = "cl-token"

_PLACEMENT_PATTERNS = (
    # "Slide 3 CL", "Slide 2 - Note CL", "Slide 4: Graph CL:"
    re.compile(r"^\s*#*\s*Slide\s+\d+(?:\s*[-–:]\s*[^\n]*?)?\s+CL\s*:?\s*$", re.I),
    # "In the note's Computation Layer:", "In the Screen 1 Computation Layer"
    re.compile(r"^\s*#*\s*In\s+the\b.*\bComputation\s+Layer\b", re.I),
    # "Add this to its Computation Layer"
    re.compile(r"^\s*#*\s*Add\b.*\bto\s+its\s+Computation\s+Layer\b", re.I),
)

_BACKTICK_SPAN = re.compile(r"`([^`\n]+)`")

_CL_TOKENS = re.compile(
    r"\b(?:"
    r"when|otherwise|content|hidden|numericValue|latex|initialLatex|submitted|"
    r"submitLabel|disableEdit|resetOnChange|simpleFunction|parseEquation|"
    r"parseOrderedPair|countNumberUsage|numberList|isUndefined|correct|"
    r"suffix|placeholderText|errorMessage|initialText|"
    r"(?:note|input|button|graph|table|sketch|choice|checkbox|screen|ordering|"
    r"media|slider|exp)\d+"
    r")\b"
)

_TRAILING_WORD = re.compile(r"\w+$")

TextOrMarkup = Union[str, Markup]


def escape_text(text: TextOrMarkup) -> Markup:
    """HTML-escape untrusted text; already-escaped markup is returned as is."""
    return escape(text or "")


def is_placement_label(line: str) -> bool:
    return any(pattern.search(line) for pattern in _PLACEMENT_PATTERNS)


def highlight_line(line: str) -> Markup:
    if is_placement_label(line):
        return Markup('<span class="{}">{}</span>').format(PLACEMENT_LABEL_CLASS, line)
    return escape(line)


def highlight_code(text: TextOrMarkup) -> Markup:
    """Line-by-line placement-label highlighting of settled code text."""
    if isinstance(text, Markup):
        return text
    return Markup("\n").join(highlight_line(line) for line in (text or "").split("\n"))


def _split_partial_word(text: str) -> Tuple[str, str]:
    match = _TRAILING_WORD.search(text)
    if not match:
        return text, ""
    return text[: match.start()], match.group(0)


def _format_tokens(segment: str) -> Markup:
    parts = []
    pos = 0
    for match in _CL_TOKENS.finditer(segment):
        parts.append(escape(segment[pos : match.start()]))
        parts.append(
            Markup('<span class="{}">{}</span>').format(TOKEN_CLASS, match.group(0))
        )
        pos = match.end()
    parts.append(escape(segment[pos:]))
    return Markup("").join(parts)


def format_chat_text(text: TextOrMarkup, complete: bool = True) -> Markup:
    """
    Inline formatting for chat-reply prose.

    Back-tick spans become inline code and CL tokens are marked. ``complete``
    is False while the text is still being revealed: a trailing word that may
    be a prefix of a longer token stays plain until more text arrives.
    """
    if isinstance(text, Markup):
        return text
    text = text or ""
    head, tail = (text, "") if complete else _split_partial_word(text)

    parts = []
    pos = 0
    for match in _BACKTICK_SPAN.finditer(head):
        parts.append(_format_tokens(head[pos : match.start()]))
        parts.append(
            Markup('<code class="{}">{}</code>').format(INLINE_CODE_CLASS, match.group(1))
        )
        pos = match.end()
    parts.append(_format_tokens(head[pos:]))
    parts.append(escape(tail))
    return Markup("").join(parts)
