"""CSV export of system log entries."""
import csv
import io
from datetime import datetime
from typing import Iterable

from dashboard.models.audit import SystemLogEntry

CSV_HEADER = ["Timestamp", "Action", "User", "Details"]
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def export_logs_csv(logs: Iterable[SystemLogEntry]) -> str:
    """
    Render entries as CSV in the order given.

    Commas inside details are replaced with semicolons.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for log in logs:
        writer.writerow([
            log.timestamp.strftime(TIMESTAMP_FORMAT),
            log.action,
            log.user_name,
            log.details.replace(",", ";"),
        ])
    return buffer.getvalue()


def export_filename(now: datetime) -> str:
    return f"system-logs-{now:%Y-%m-%d}.csv"
