"""Legacy absence-justification marker embedded in free-text notes.

Older rows store the justification as the first paragraph of ``notes``::

    JUSTIFICATIVA DE FALTA: <text>

    <previous notes>

The justification now lives in its own field; these helpers migrate rows out
of that format and, when configured, write it back for downstream readers.
"""

from typing import Optional

ABSENCE_MARKER = "JUSTIFICATIVA DE FALTA:"
PARAGRAPH_SEP = "\n\n"


def split_legacy_notes(notes: str) -> tuple[Optional[str], str]:
    """Return ``(justification, remaining_notes)``.

    Notes without the marker come back unchanged with ``None``.
    """
    if not notes or not notes.startswith(ABSENCE_MARKER):
        return None, notes or ""
    head, _, rest = notes.partition(PARAGRAPH_SEP)
    justification = head[len(ABSENCE_MARKER):].strip()
    return justification, rest


def embed_justification(justification: Optional[str], notes: str) -> str:
    """Prefix *notes* with the marker paragraph, replacing an existing one."""
    _, remainder = split_legacy_notes(notes)
    if not justification:
        return remainder
    return f"{ABSENCE_MARKER} {justification}{PARAGRAPH_SEP}{remainder}".strip()
