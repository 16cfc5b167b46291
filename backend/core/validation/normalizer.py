"""Text Normalizer

Canonicalizes free text before it is stored or displayed.

``normalize`` tidies whitespace and punctuation; ``sanitize`` runs
``normalize`` and then a configurable filter pipeline (blacklist, tab and
newline handling, optional whitelist, truncation). Lengths are counted in
Unicode code points.
"""
from __future__ import annotations

import re
import unicodedata

from pydantic import BaseModel, ConfigDict, Field

ELLIPSIS = "\u2026"

# Control (Cc) and format (Cf) characters
CONTROL_AND_FORMAT = (
    r"[\x00-\x1f\x7f-\x9f"
    r"\u00ad\u0600-\u0605\u061c\u06dd\u070f\u0890-\u0891\u08e2\u180e"
    r"\u200b-\u200f\u202a-\u202e\u2060-\u2064\u2066-\u206f\ufeff\ufff9-\ufffb"
    r"\U000110bd\U000110cd\U00013430-\U0001343f\U0001bca0-\U0001bca3"
    r"\U0001d173-\U0001d17a\U000e0001\U000e0020-\U000e007f]"
)
BIDI_OVERRIDES = r"[\u202a-\u202e]"
ANGLE_BRACKETS = r"[<>]"
SHELL_METACHARACTERS = r"[`~^|\\]"

DEFAULT_BLACKLIST = (CONTROL_AND_FORMAT, BIDI_OVERRIDES, ANGLE_BRACKETS, SHELL_METACHARACTERS)

# Printable ASCII, no-break space and the Latin-1 / Latin Extended-A/B letters
DEFAULT_WHITELIST = r"[\x20-\x7e\u00a0\u00c0-\u024f]"

_WHITESPACE_RUN = re.compile(r"\s+")
_DOT_RUN = re.compile(r"\.{3,}")
_REPEATED_PUNCT = re.compile(r"""([!?.,:;"'\-()\[\]{}])\1+""")
_SPACE_BEFORE_CLOSING = re.compile(r"\s+([!?.,:;)\]}])")
_SENTENCE_PUNCT_FOLLOWED = re.compile(r"([!?.:;,])(?=[^\s0-9])")
_TABS = re.compile(r"\t+")
_NEWLINES = re.compile(r"(?:\r\n|[\n\v\f\r\x85\u2028\u2029])+")


def _is_punctuation(char: str) -> bool:
    return unicodedata.category(char).startswith("P")


def _space_after_sentence_punct(match: re.Match) -> str:
    following = match.string[match.end()]
    if _is_punctuation(following):
        return match.group(1)
    return match.group(1) + " "


def normalize(text: str) -> str:
    """Trim, collapse whitespace and tidy punctuation.

    >>> normalize("Hello!!!   World...")
    'Hello! World\u2026'
    """
    text = text.strip()
    text = _WHITESPACE_RUN.sub(" ", text)
    text = _DOT_RUN.sub(ELLIPSIS, text)
    text = _REPEATED_PUNCT.sub(r"\1", text)
    text = _SPACE_BEFORE_CLOSING.sub(r"\1", text)
    text = _SENTENCE_PUNCT_FOLLOWED.sub(_space_after_sentence_punct, text)
    return text


class SanitizeOptions(BaseModel):
    """Filter pipeline configuration for ``sanitize``.

    ``max_length=None`` disables truncation.

    ``allow_tabs`` and ``allow_newlines`` cannot bring tabs or newlines back:
    ``normalize`` runs first and has already collapsed every whitespace run
    to a single space.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    max_length: int | None = Field(default=1000, ge=0)
    allow_tabs: bool = False
    allow_newlines: bool = False
    use_whitelist: bool = False
    whitelist_pattern: str = DEFAULT_WHITELIST
    blacklist_patterns: tuple[str, ...] = DEFAULT_BLACKLIST


DEFAULT_OPTIONS = SanitizeOptions()


def sanitize(text: str, options: SanitizeOptions | None = None, **overrides) -> str:
    """Normalize ``text`` and run it through the filter pipeline.

    Keyword overrides are applied on top of ``options``:

        sanitize(raw, max_length=255)
    """
    opts = options or DEFAULT_OPTIONS
    if overrides:
        opts = SanitizeOptions(**{**opts.model_dump(), **overrides})

    text = normalize(text)

    for pattern in opts.blacklist_patterns:
        text = re.sub(pattern, "", text)

    if not opts.allow_tabs:
        text = _TABS.sub(" ", text)
    if not opts.allow_newlines:
        text = _NEWLINES.sub(" ", text)

    if opts.use_whitelist:
        allowed = re.compile(opts.whitelist_pattern)
        text = "".join(ch for ch in text if allowed.fullmatch(ch))

    if opts.max_length is not None and len(text) > opts.max_length:
        text = text[: opts.max_length]

    return text
