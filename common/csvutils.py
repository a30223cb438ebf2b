"""CSV downloads for the report and transfer exports."""
import csv
from datetime import date, datetime
from decimal import Decimal

from django.http import StreamingHttpResponse

from .dates import format_date, format_datetime
from .money import to_money


class _LineBuffer:
    """csv.writer target that hands each written line straight back."""

    def write(self, line):
        return line


def csv_cell(value):
    """Amounts to 2 places, dates as YYYY-MM-DD[ HH:MM:SS], None as an empty cell."""
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return str(to_money(value))
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, date):
        return format_date(value)
    return value


def stream_csv(rows, filename: str):
    """Stream rows (iterables of cells) as a CSV attachment without building the file in memory."""
    writer = csv.writer(_LineBuffer())
    resp = StreamingHttpResponse(
        (writer.writerow([csv_cell(v) for v in row]) for row in rows),
        content_type="text/csv",
    )
    resp["Content-Disposition"] = f'attachment; filename="{filename}"'
    return resp
