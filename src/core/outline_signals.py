"""
Outline Signal Extractor for BriefDeck

Finds an explicit slide outline and a slide-count range in raw brief
text. Pure and deterministic; the result is advisory only.

Grammar, applied per line (case-insensitive):

    marker_line  := WS* ("slide" | "page") WS* NUM3 WS* (":" | "-" | "–" | "•") WS* TITLE
    numbered     := WS* NUM3 WS* (")" | "." | ":" | "-") WS* TITLE      ; len(TITLE) <= 140

and anywhere in the text:

    range_hint   := NUM2 WS* ("-" | "–") WS* NUM2 WS* "slide" ["s"]

NUM3 is 1-3 digits, NUM2 is 1-2 digits. The first title seen for a
slide number wins; entries come back sorted by number.
"""

import re
from typing import Dict

from src.models.brief import ExplicitOutlineSignal, OutlineEntry, SlideCountRange

MAX_NUMBERED_TITLE_LENGTH = 140

_MARKER_LINE = re.compile(r"^\s*(?:slide|page)\s*(\d{1,3})\s*[:\-–•]\s*(.+?)\s*$", re.IGNORECASE)
_NUMBERED_LINE = re.compile(r"^\s*(\d{1,3})\s*[\).:\-]\s*(.+?)\s*$")
_RANGE_HINT = re.compile(r"(\d{1,2})\s*[–-]\s*(\d{1,2})\s*slides?", re.IGNORECASE)


def extract_outline_signals(brief_text: str) -> ExplicitOutlineSignal:
    """
    Parse numbered slide titles and a slide-count range from a brief.

    Args:
        brief_text: Raw brief text

    Returns:
        ExplicitOutlineSignal; empty when nothing matches
    """
    text = brief_text or ""
    titles: Dict[int, str] = {}

    for line in text.splitlines():
        match = _MARKER_LINE.match(line)
        if match:
            number, title = int(match.group(1)), match.group(2).strip()
        else:
            match = _NUMBERED_LINE.match(line)
            if not match:
                continue
            number, title = int(match.group(1)), match.group(2).strip()
            # Long numbered paragraphs are prose, not slide titles
            if len(title) > MAX_NUMBERED_TITLE_LENGTH:
                continue

        if title and number not in titles:
            titles[number] = title

    entries = [OutlineEntry(slide_number=n, title=titles[n]) for n in sorted(titles)]

    slide_count_range = None
    range_match = _RANGE_HINT.search(text)
    if range_match:
        slide_count_range = SlideCountRange(
            min=int(range_match.group(1)),
            max=int(range_match.group(2)),
        )

    return ExplicitOutlineSignal(entries=entries, slide_count_range=slide_count_range)
