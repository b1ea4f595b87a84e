from .formatting import format_date, format_time, render_body, render_line
from .writer import RenderSummary, render_transcripts

__all__ = [
    "RenderSummary",
    "format_date",
    "format_time",
    "render_body",
    "render_line",
    "render_transcripts",
]
