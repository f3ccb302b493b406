"""Paginated table documents."""

from __future__ import annotations

import io
import os
from datetime import datetime
from typing import Any, Sequence

import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

from pulseboard.logic.export_csv import ColumnKind, ExportOptions, format_rows
from pulseboard.utils.dates import now_in_tz

plt.switch_backend("Agg")

ROWS_PER_PAGE = int(os.environ.get("PDF_ROWS_PER_PAGE", 25))
PAGE_SIZE = (8.27, 11.69)
HEADER_COLOR = "#428bca"
STRIPE_COLOR = "#f5f5f5"


def paginate(rows: Sequence[Any], per_page: int = ROWS_PER_PAGE) -> list[list[Any]]:
    """Split rows into pages; an empty export still gets one page."""
    if not rows:
        return [[]]
    return [list(rows[start:start + per_page]) for start in range(0, len(rows), per_page)]


def display_number(value: Any) -> str:
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.3f}".rstrip("0").rstrip(".")
    if isinstance(value, (int, float)):
        return f"{int(value):,}"
    return str(value)


def to_pdf(options: ExportOptions, *, generated_at: datetime | None = None) -> bytes:
    columns = options.bound
    labels = [column.label for column in columns]
    rows = format_rows(options.records, columns)
    cells = [
        [display_number(row[c.key]) if c.kind is ColumnKind.NUMBER else str(row[c.key]) for c in columns]
        for row in rows
    ]
    widths = _column_widths(options)
    pages = paginate(cells)
    stamp = (generated_at or now_in_tz()).strftime("%Y-%m-%d %H:%M:%S")

    buffer = io.BytesIO()
    with PdfPages(buffer) as pdf:
        for number, chunk in enumerate(pages, start=1):
            fig = plt.figure(figsize=PAGE_SIZE)
            top = 0.95
            if options.title:
                fig.text(0.07, top, options.title, fontsize=18, fontweight="bold")
                top -= 0.03
            fig.text(0.07, top, f"Generated on: {stamp}", fontsize=10)
            ax = fig.add_axes([0.07, 0.08, 0.86, top - 0.12])
            ax.axis("off")
            if chunk:
                table = ax.table(cellText=chunk, colLabels=labels, colWidths=widths, loc="upper center")
                table.auto_set_font_size(False)
                table.set_fontsize(8)
                table.scale(1, 1.3)
                for (row_idx, _), cell in table.get_celld().items():
                    if row_idx == 0:
                        cell.set_facecolor(HEADER_COLOR)
                        cell.get_text().set_color("white")
                        cell.get_text().set_fontweight("bold")
                    elif row_idx % 2 == 0:
                        cell.set_facecolor(STRIPE_COLOR)
            else:
                ax.text(0.5, 0.95, "No data", ha="center", va="top")
            fig.text(0.93, 0.03, f"Page {number} of {len(pages)}", fontsize=8, ha="right")
            pdf.savefig(fig)
            plt.close(fig)
    return buffer.getvalue()


def _column_widths(options: ExportOptions) -> list[float] | None:
    widths = [column.width for column in options.bound]
    if not widths or any(width is None for width in widths):
        return None
    total = sum(widths)
    return [width / total for width in widths]
