"""CSV export helpers."""

from __future__ import annotations

import csv
import io
import logging
import operator
import os
import types
import typing
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Sequence

from pulseboard.ingest.models import CampaignConversion, OverviewMetrics, RevenueDataPoint
from pulseboard.utils.dates import localized_date

logger = logging.getLogger(__name__)

OUTPUT_DIR = Path(os.environ.get("EXPORT_OUTPUT_DIR", "artifacts/exports"))

EXPORT_FORMATS = ("csv", "pdf")


class ColumnKind(str, Enum):
    NUMBER = "number"
    DATE = "date"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class ExportColumn:
    key: str
    label: str
    width: float | None = None


@dataclass(frozen=True, slots=True)
class BoundColumn:
    key: str
    label: str
    width: float | None
    kind: ColumnKind
    accessor: Callable[[Any], Any]
    formatter: Callable[[Any], Any]


def _pass_number(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _format_date(value: Any) -> str:
    return localized_date(value) if value is not None else ""


def _format_text(value: Any) -> str:
    return "" if value is None else str(value)


FORMATTERS: dict[ColumnKind, Callable[[Any], Any]] = {
    ColumnKind.NUMBER: _pass_number,
    ColumnKind.DATE: _format_date,
    ColumnKind.TEXT: _format_text,
}


def _kind_for(hint: Any) -> ColumnKind:
    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return _kind_for(args[0])
        return ColumnKind.TEXT
    if isinstance(hint, type):
        if issubclass(hint, bool):
            return ColumnKind.TEXT
        if issubclass(hint, (int, float)):
            return ColumnKind.NUMBER
        if issubclass(hint, datetime):
            return ColumnKind.DATE
    return ColumnKind.TEXT


def resolve_columns(record_type: type, columns: Sequence[ExportColumn]) -> list[BoundColumn]:
    """Bind each column to an accessor and a formatter picked from the field type."""
    hints = typing.get_type_hints(record_type)
    bound: list[BoundColumn] = []
    for column in columns:
        if column.key not in hints:
            raise ValueError(f"{record_type.__name__} has no field {column.key!r}")
        kind = _kind_for(hints[column.key])
        bound.append(
            BoundColumn(
                key=column.key,
                label=column.label,
                width=column.width,
                kind=kind,
                accessor=operator.attrgetter(column.key),
                formatter=FORMATTERS[kind],
            )
        )
    return bound


@dataclass(slots=True)
class ExportOptions:
    filename: str
    record_type: type
    columns: Sequence[ExportColumn]
    records: Sequence[Any]
    title: str | None = None
    bound: list[BoundColumn] = field(init=False)

    def __post_init__(self) -> None:
        self.bound = resolve_columns(self.record_type, self.columns)


EXPORT_COLUMNS: dict[str, tuple[type, list[ExportColumn]]] = {
    "campaigns": (
        CampaignConversion,
        [
            ExportColumn("campaign", "Campaign Name", 60),
            ExportColumn("conversions", "Conversions", 30),
            ExportColumn("date", "Date", 40),
        ],
    ),
    "revenue": (
        RevenueDataPoint,
        [
            ExportColumn("date", "Date", 40),
            ExportColumn("revenue", "Revenue ($)", 40),
        ],
    ),
    "overview": (
        OverviewMetrics,
        [
            ExportColumn("date", "Date", 40),
            ExportColumn("revenue", "Revenue ($)", 30),
            ExportColumn("users", "Users", 25),
            ExportColumn("conversions", "Conversions", 30),
            ExportColumn("growth", "Growth (%)", 25),
        ],
    ),
}


def preset_options(name: str, records: Sequence[Any], *, filename: str | None = None, title: str | None = None) -> ExportOptions:
    record_type, columns = EXPORT_COLUMNS[name]
    return ExportOptions(
        filename=filename or f"{name}-export",
        record_type=record_type,
        columns=columns,
        records=records,
        title=title,
    )


def format_rows(records: Sequence[Any], columns: Sequence[BoundColumn]) -> list[dict[str, Any]]:
    return [
        {column.key: column.formatter(column.accessor(record)) for column in columns}
        for record in records
    ]


def to_csv(options: ExportOptions) -> str:
    rows = format_rows(options.records, options.bound)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=[column.label for column in options.bound])
    writer.writeheader()
    writer.writerows({column.label: row[column.key] for column in options.bound} for row in rows)
    return buffer.getvalue()


def export_data(fmt: str, options: ExportOptions, output_dir: Path | None = None) -> Path:
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format {fmt!r}")
    directory = output_dir or OUTPUT_DIR
    directory.mkdir(parents=True, exist_ok=True)
    file_path = directory / f"{options.filename}.{fmt}"
    if fmt == "csv":
        with file_path.open("w", newline="") as csvfile:
            csvfile.write(to_csv(options))
    else:
        from pulseboard.logic.export_pdf import to_pdf

        file_path.write_bytes(to_pdf(options))
    logger.info("Exported %s rows to %s", len(options.records), file_path)
    return file_path
