from __future__ import annotations

import csv
import io
from typing import Sequence


def rows_to_csv(rows: Sequence[dict], *, columns: Sequence[str]) -> bytes:
    """CSV bytes with a BOM so Excel opens non-ASCII names correctly."""

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=list(columns), extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")
