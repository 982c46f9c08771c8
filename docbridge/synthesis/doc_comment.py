"""
Documentation comment parsing and serialization.

``parse_doc_comment`` turns an existing ``/** ... */`` block into an ordered
tag list; free text before the first tag becomes a ``desc`` tag.
``build_doc_comment`` serializes a tag list back into a comment block.
"""

import re
from typing import List, Optional

from docbridge.models.doc_tag import DocTag

DESCRIPTION_TAG = "desc"

_LINE_LEADER = re.compile(r"^\*[ \t]?")
_TAG_LINE = re.compile(r"^@(\w+)(?:[ \t]+(.*))?$")


def _comment_lines(comment: str) -> List[str]:
    body = comment.strip()
    if body.startswith("/**"):
        body = body[3:]
    elif body.startswith("/*"):
        body = body[2:]
    if body.endswith("*/"):
        body = body[:-2]

    lines = [
        _LINE_LEADER.sub("", line.strip()).rstrip()
        for line in body.replace("\r\n", "\n").split("\n")
    ]

    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return lines


def parse_doc_comment(comment: Optional[str]) -> List[DocTag]:
    """
    Parse a documentation comment into tags.

    Lines inside ``` fences are never treated as tag starts.

    Args:
        comment: Full comment text including delimiters, or None

    Returns:
        Tags in source order
    """
    if not comment:
        return []

    tags: List[DocTag] = []
    name: Optional[str] = None
    buffer: List[str] = []
    in_fence = False

    def flush() -> None:
        if name is None:
            return
        value = "\n".join(buffer).strip("\n")
        if name == DESCRIPTION_TAG and not value:
            return
        tags.append(DocTag(name=name, value=value))

    for line in _comment_lines(comment):
        match = None if in_fence else _TAG_LINE.match(line)
        if match:
            flush()
            name = match.group(1)
            buffer = [match.group(2) or ""]
            continue

        if line.startswith("```"):
            in_fence = not in_fence
        if name is None:
            name = DESCRIPTION_TAG
        buffer.append(line)

    flush()
    return tags


def description_text(tags: List[DocTag]) -> str:
    """Return the description of a tag list collapsed onto one line."""
    for tag in tags:
        if tag.name == DESCRIPTION_TAG:
            return " ".join(part.strip() for part in tag.value.split("\n") if part.strip())
    return ""


def build_doc_comment(tags: List[DocTag], indent: str = "") -> str:
    """
    Serialize tags into a ``/** ... */`` block.

    Args:
        tags: Tags to emit, in order
        indent: Prefix for every line after the first

    Returns:
        Comment text without a trailing newline
    """
    lines = ["/**"]
    for tag in tags:
        if tag.name == DESCRIPTION_TAG:
            text = tag.value
        else:
            text = f"@{tag.name} {tag.value}".rstrip()
        for part in text.split("\n"):
            lines.append(f" * {part}".rstrip())
    lines.append(" */")
    return ("\n" + indent).join(lines)
