# utils/export.py
import io
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

import pandas as pd
from openpyxl.utils import get_column_letter

from models.request import Request

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
EXPORT_FILENAME = "requests.xlsx"
SHEET_NAME = "Requests"

# Column header -> width, in sheet order
EXPORT_COLUMNS = [
    ("Request ID", 10),
    ("User Name", 20),
    ("User Email", 25),
    ("Team", 20),
    ("Created At", 20),
    ("Item Name", 20),
    ("Description", 30),
    ("Quantity", 10),
    ("Price", 10),
    ("Source", 20),
    ("Sample File", 30),
]
COLUMN_NAMES = [name for name, _ in EXPORT_COLUMNS]


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Excel cells cannot hold timezone-aware datetimes
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def build_export_rows(requests: Iterable[Request], link_for: Callable[[str], str]) -> List[Dict]:
    """One row per (request, item); request and user columns repeat."""
    rows = []
    for req in requests:
        for item in req.items:
            rows.append({
                "Request ID": req.id,
                "User Name": req.user.name,
                "User Email": req.user.email,
                "Team": req.user.team_name,
                "Created At": _naive_utc(req.created_at),
                "Item Name": item.name,
                "Description": item.description,
                "Quantity": item.quantity,
                "Price": float(item.price),
                "Source": item.source,
                "Sample File": link_for(item.sample_file) if item.sample_file else "",
            })
    return rows


def render_workbook(rows: List[Dict]) -> bytes:
    frame = pd.DataFrame(rows, columns=COLUMN_NAMES)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, index=False, sheet_name=SHEET_NAME)
        sheet = writer.sheets[SHEET_NAME]
        for idx, (_, width) in enumerate(EXPORT_COLUMNS, start=1):
            sheet.column_dimensions[get_column_letter(idx)].width = width
    return buffer.getvalue()
