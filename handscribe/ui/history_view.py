"""Rich renderables for transcription records and history listings."""

from typing import Iterable

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models.transcription import TranscriptionRecord

PREVIEW_LENGTH = 60


def _preview(text: str, length: int = PREVIEW_LENGTH) -> str:
    flat = " ".join(text.split())
    if len(flat) <= length:
        return flat
    return flat[:length - 1] + "…"


def render_record(record: TranscriptionRecord) -> Panel:
    """Panel showing the full text of one record."""
    subtitle = escape(record.image_ref) if record.has_image else "no image"
    return Panel(
        Text(record.text),
        title=f"Transcription {record.display_timestamp}",
        subtitle=subtitle,
        border_style="green",
    )


def render_history(records: Iterable[TranscriptionRecord], substring: str = "") -> Table:
    """Table of records, newest first."""
    title = "History" if not substring else f"History matching '{escape(substring)}'"
    table = Table(title=title, show_lines=False)
    table.add_column("Time", style="cyan", no_wrap=True)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Text")
    table.add_column("Image", style="magenta")

    for record in records:
        table.add_row(
            record.display_timestamp,
            record.id[:8],
            Text(_preview(record.text)),
            "yes" if record.has_image else "-",
        )

    return table
