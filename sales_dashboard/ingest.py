"""
ingest.py — Parse an uploaded CSV/XLSX file into an ImportBatch.

Pure: nothing here touches the network. Committing a batch is a separate,
explicit step (SalesController.commit_import).
"""

import io
import logging
import math
import zipfile

import pandas as pd

from sales_dashboard.config import IMPORT_EXTENSIONS
from sales_dashboard.errors import EmptyFile, InvalidRow, MissingColumns, UnsupportedFormat
from sales_dashboard.models import ImportBatch, ImportRow

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("name", "value")


def normalize_extension(name_or_ext):
    """'Report.XLSX' / '.xlsx' / 'xlsx' -> 'xlsx'."""
    ext = (name_or_ext or "").strip().lower()
    if "." in ext:
        ext = ext.rsplit(".", 1)[-1]
    return ext


def _is_missing(val):
    if val is None:
        return True
    if isinstance(val, float) and math.isnan(val):
        return True
    if isinstance(val, str) and not val.strip():
        return True
    return False


def read_rows(content, extension):
    """Decode the first sheet/table into a list of row dicts (all-blank rows dropped)."""
    ext = normalize_extension(extension)
    if ext not in IMPORT_EXTENSIONS:
        raise UnsupportedFormat()
    try:
        if ext == "csv":
            df = pd.read_csv(io.BytesIO(content), dtype=str, encoding="utf-8-sig",
                             skip_blank_lines=True)
        else:
            df = pd.read_excel(io.BytesIO(content), sheet_name=0, dtype=object, engine="openpyxl")
    except pd.errors.EmptyDataError:
        raise EmptyFile()
    except (ValueError, zipfile.BadZipFile, UnicodeDecodeError, pd.errors.ParserError) as e:
        logger.info("Could not decode %s upload: %s", ext, e)
        raise UnsupportedFormat(f"The file could not be read as .{ext}", cause=e)

    df.columns = [str(c).strip().lower() for c in df.columns]
    df = df.dropna(how="all")
    return df.to_dict("records")


def _coerce_row(index, row):
    name = row.get("name")
    if _is_missing(name):
        raise InvalidRow(index, "name is empty")
    raw = row.get("value")
    if _is_missing(raw):
        raise InvalidRow(index, "value is empty")
    try:
        value = float(str(raw).strip()) if isinstance(raw, str) else float(raw)
    except (TypeError, ValueError) as e:
        raise InvalidRow(index, f"value {raw!r} is not a number", cause=e)
    if math.isnan(value) or math.isinf(value):
        raise InvalidRow(index, f"value {raw!r} is not a number")
    return ImportRow(name=str(name).strip(), value=value)


def parse_rows(rows, source=""):
    """Validate decoded rows and convert them into a typed ImportBatch.

    Only the first row is checked for the required columns; every row is
    then coerced, and the first row that fails raises InvalidRow with its index.
    """
    if not rows:
        raise EmptyFile()
    first = rows[0]
    if any(col not in first or _is_missing(first[col]) for col in REQUIRED_COLUMNS):
        raise MissingColumns()
    return ImportBatch(rows=[_coerce_row(i, r) for i, r in enumerate(rows)], source=source)


def parse_import_file(content, extension, source=""):
    """bytes + declared extension -> ImportBatch, or a DashboardError."""
    rows = read_rows(content, extension)
    batch = parse_rows(rows, source=source)
    logger.info("Parsed %d import rows from %s", len(batch), source or extension)
    return batch
