"""Plain-text excerpts from Markdown bodies.

Used as the post description when front matter doesn't set one.
"""

import re

DEFAULT_EXCERPT_LENGTH = 150

CODE_FENCE = "```"

# Heading, list, quote and numbered-list markers at line start
LINE_MARKER_PATTERN = re.compile(r"^(?:#+|[-*+]|>|\d+\.)\s*")
LINK_PATTERN = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
INLINE_CODE_PATTERN = re.compile(r"`[^`]*`")
EMPHASIS_PATTERN = re.compile(r"[*_]{1,2}([^*_]+)[*_]{1,2}")
HTML_TAG_PATTERN = re.compile(r"<[^>]*>")


def _strip_line(line: str) -> str:
    """Remove block markers and inline formatting from a single line."""
    line = LINE_MARKER_PATTERN.sub("", line, count=1)
    line = LINK_PATTERN.sub(r"\1", line)
    line = INLINE_CODE_PATTERN.sub("", line)
    line = EMPHASIS_PATTERN.sub(r"\1", line)
    line = HTML_TAG_PATTERN.sub("", line)
    return line.strip()


def extract_excerpt(markdown: str, max_length: int = DEFAULT_EXCERPT_LENGTH) -> str:
    """Extract a plain-text excerpt from Markdown.

    Code blocks, tables and ``:::`` containers are skipped, as are lines
    shorter than three characters after stripping. Text longer than
    ``max_length`` is cut at a nearby space and suffixed with "...".

    Args:
        markdown: Markdown body without front matter
        max_length: Maximum excerpt length before the ellipsis

    Returns:
        Excerpt text, empty if the body has no prose
    """
    parts: list[str] = []
    length = 0
    in_code_block = False

    for raw_line in markdown.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith(CODE_FENCE):
            in_code_block = not in_code_block
            continue
        if in_code_block or line.startswith(("|", ":")):
            continue

        text = _strip_line(line)
        if len(text) < 3:
            continue
        parts.append(text)
        length += len(text) + 1
        if length >= max_length + 50:
            break

    result = " ".join(parts)
    if len(result) <= max_length:
        return result

    cut = max_length
    min_cut = int(max_length * 0.8)
    while cut > min_cut and result[cut] != " ":
        cut -= 1
    return f"{result[:cut]}..."
