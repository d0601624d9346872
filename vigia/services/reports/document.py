"""
Vigia - Monthly Document
========================

Renders a one-page PDF summary of a period slice with Pillow.
"""

from pathlib import Path
from typing import List

from PIL import Image, ImageDraw, ImageFont

from vigia.core.constants import REPORT_TOP_PUNISHMENTS
from vigia.services.aggregation import PeriodSlice


# =============================================================================
# Constants
# =============================================================================

# A4 at 150 dpi
PAGE_SIZE = (1240, 1754)
PAGE_DPI = 150.0
MARGIN = 75

BACKGROUND = (255, 255, 255)
TEXT_COLOR = (20, 20, 20)
MUTED_COLOR = (90, 90, 90)

TITLE_SIZE = 38
HEADING_SIZE = 29
BODY_SIZE = 25
SMALL_SIZE = 21

MAX_LINE_CHARS = 90

_FONT_PATHS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/System/Library/Fonts/Helvetica.ttc",
)


def _load_font(size: int) -> ImageFont.ImageFont:
    """First available TrueType font, or Pillow's built-in one."""
    for font_path in _FONT_PATHS:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError:
            continue
    return ImageFont.load_default()


def _truncate(text: str, limit: int = MAX_LINE_CHARS) -> str:
    return text if len(text) <= limit else text[:limit - 3] + "..."


def summary_lines(period: PeriodSlice) -> List[str]:
    """One line per punishment, capped to the report's top entries."""
    lines = []
    for index, p in enumerate(period.punishments[:REPORT_TOP_PUNISHMENTS], start=1):
        who = p["member_name"] or p["member_id"]
        lines.append(_truncate(
            f"{index}. {p['timestamp']} - {who}: {p['kind']} ({p['reason'] or '-'})"
        ))
    return lines


def write_document(period: PeriodSlice, path: Path) -> None:
    """
    Render the monthly summary to a PDF at path.

    Layout: title, fact counts, then the first punishments of the month.
    """
    page = Image.new("RGB", PAGE_SIZE, BACKGROUND)
    draw = ImageDraw.Draw(page)

    title_font = _load_font(TITLE_SIZE)
    heading_font = _load_font(HEADING_SIZE)
    body_font = _load_font(BODY_SIZE)
    small_font = _load_font(SMALL_SIZE)

    y = MARGIN
    title = f"Monthly Report - {period.month}"
    draw.text((MARGIN, y), title, font=title_font, fill=TEXT_COLOR)
    bbox = draw.textbbox((MARGIN, y), title, font=title_font)
    draw.line([(MARGIN, bbox[3] + 6), (bbox[2], bbox[3] + 6)], fill=TEXT_COLOR, width=2)
    y = bbox[3] + 40

    draw.text(
        (MARGIN, y),
        f"Logs: {len(period.logs)}  |  Punishments: {len(period.punishments)}  |  "
        f"Ticket records: {len(period.ticket_batches)}",
        font=body_font,
        fill=TEXT_COLOR,
    )
    y += BODY_SIZE + 14
    draw.text((MARGIN, y), f"{period.start} to {period.end}", font=small_font, fill=MUTED_COLOR)
    y += SMALL_SIZE + 40

    draw.text((MARGIN, y), f"Top {REPORT_TOP_PUNISHMENTS} Punishments:", font=heading_font, fill=TEXT_COLOR)
    y += HEADING_SIZE + 20

    lines = summary_lines(period)
    if not lines:
        draw.text((MARGIN, y), "No punishments recorded.", font=small_font, fill=MUTED_COLOR)
    for line in lines:
        draw.text((MARGIN, y), line, font=small_font, fill=TEXT_COLOR)
        y += SMALL_SIZE + 12

    page.save(str(path), format="PDF", resolution=PAGE_DPI)


__all__ = ["write_document", "summary_lines"]
