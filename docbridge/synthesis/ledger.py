"""
Edit ledger and source rewriter.

The ledger collects byte-addressed splices and comment targets while the
selector walks the tree; ``rewrite`` applies all of them to the original
source in a single tail-to-head pass, so every position still refers to the
original text when it is applied.
"""

import logging
from typing import List

from docbridge.models.declaration import DeclarationKind
from docbridge.models.doc_tag import DocTag
from docbridge.models.edit import Edit, TargetNode
from docbridge.synthesis.doc_comment import build_doc_comment

logger = logging.getLogger(__name__)


class EditLedger:
    """Unordered collection of edits and comment targets for one file."""

    def __init__(self):
        self.edits: List[Edit] = []
        self.targets: List[TargetNode] = []

    def insert(self, position: int, text: str) -> Edit:
        """Register an insertion at ``position``."""
        return self.replace(position, 0, text)

    def delete(self, start: int, end: int) -> Edit:
        """Register removal of the byte range ``[start, end)``."""
        return self.replace(start, end - start, "")

    def replace(self, position: int, remove_length: int, text: str) -> Edit:
        """Register a splice of ``remove_length`` bytes at ``position``."""
        edit = Edit(
            position=position,
            remove_length=remove_length,
            text=text,
            sequence=len(self.edits),
        )
        self.edits.append(edit)
        return edit

    def add_target(
        self,
        kind: DeclarationKind,
        position: int,
        remove_length: int,
        indent: str,
        line_number: int,
        tags: List[DocTag]
    ) -> TargetNode:
        """Register a declaration receiving a comment at ``position``."""
        target = TargetNode(
            kind=kind,
            position=position,
            remove_length=remove_length,
            indent=indent,
            line_number=line_number,
            tags=tags,
        )
        self.targets.append(target)
        return target

    def __len__(self) -> int:
        return len(self.edits) + len(self.targets)


def _apply(buffer: bytearray, edit: Edit) -> None:
    end = edit.position + edit.remove_length
    buffer[edit.position:end] = edit.text.encode("utf8")


def rewrite(source: bytes, ledger: EditLedger) -> str:
    """
    Apply a ledger to the original source.

    Targets and edits are each sorted by descending position. Before a
    target's comment goes in, every edit located after it is applied; edits
    at or before the earliest target are applied last. Inserts sharing a
    position are applied newest first so they read in registration order.

    Args:
        source: Original UTF-8 source bytes
        ledger: Ledger filled by the selector

    Returns:
        Rewritten source text
    """
    buffer = bytearray(source)
    targets = sorted(ledger.targets, key=lambda t: t.position, reverse=True)
    pending = sorted(ledger.edits, key=lambda e: (e.position, e.sequence), reverse=True)

    index = 0
    for target in targets:
        while index < len(pending) and pending[index].position > target.position:
            _apply(buffer, pending[index])
            index += 1

        comment = build_doc_comment(target.tags, target.indent)
        if not target.remove_length:
            # a replaced comment keeps its original separator
            comment += "\n" + target.indent
        end = target.position + target.remove_length
        buffer[target.position:end] = comment.encode("utf8")

    for edit in pending[index:]:
        _apply(buffer, edit)

    logger.debug(
        f"Rewrote source with {len(targets)} comments and {len(pending)} edits"
    )
    return buffer.decode("utf8")
