"""CSV export utilities."""
import csv
import io

from django.http import HttpResponse


def rows_to_csv(rows) -> str:
    """Serialize a list of dicts to CSV text.

    The header is taken from the keys of the first record. Lines are joined
    with ``\\n`` and the text has no trailing newline. Values containing the
    delimiter, quotes or line breaks are quoted by the csv module.
    """
    rows = list(rows)
    if not rows:
        return ""

    headers = list(rows[0].keys())
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(["" if row.get(key) is None else row.get(key) for key in headers])
    return buffer.getvalue().removesuffix("\n")


def csv_download(rows, filename):
    """Wrap :func:`rows_to_csv` output in an attachment response."""
    response = HttpResponse(rows_to_csv(rows), content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response
