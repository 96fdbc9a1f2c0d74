import csv
import io
import json
from typing import Any, Iterable, Mapping, Union

from pydantic import BaseModel


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return str(value)


def to_csv(records: Iterable[Union[BaseModel, Mapping[str, Any]]]) -> str:
    """
    Header row from the first record's fields, then one row per record with
    every cell quoted. Nested values (a sale's items) are written as JSON.
    """
    rows = [r.model_dump(mode="json") if isinstance(r, BaseModel) else dict(r) for r in records]
    if not rows:
        return ""

    keys = list(rows[0].keys())
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(keys)
    for row in rows:
        writer.writerow([_cell(row.get(k)) for k in keys])
    return buf.getvalue()
