# timesheet-backend/app/services/export.py
import csv
import io
from typing import Iterable

CSV_HEADER = [
    "Date", "Client File Number", "Task", "Activity", "Priority", "Start Time", "End Time",
    "Total Hours", "Status", "Billable", "Employee Name", "Employee Email", "Department", "Comments",
]


def entries_to_csv(entries: Iterable) -> str:
    """Flattens entries (with their owner loaded) into one CSV row each."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for entry in entries:
        writer.writerow([
            entry.date.isoformat(),
            entry.client_file_number,
            entry.task,
            entry.activity,
            entry.priority,
            entry.start_time.strftime("%H:%M"),
            entry.end_time.strftime("%H:%M"),
            f"{entry.total_hours:.2f}",
            entry.status,
            "Yes" if entry.billable else "No",
            entry.owner.full_name,
            entry.owner.email,
            entry.department,
            entry.comments or "",
        ])
    return output.getvalue()
