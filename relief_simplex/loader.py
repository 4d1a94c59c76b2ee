"""Build demand sites from tabular data (CSV, Excel or an existing DataFrame)."""

import io
import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import pandas as pd

from .exceptions import InputError
from .model import DemandSite, ProblemInstance, build_problem

# Accepted headers for each field, after normalisation
COLUMN_ALIASES = {
    "name": ("name", "nama_lokasi", "site", "location"),
    "minimum_requirement": ("minimum_requirement", "kebutuhan_minimal", "min_need"),
    "unit_cost": ("unit_cost", "biaya_per_paket", "cost_per_packet"),
    "total_capacity": ("total_capacity", "total_stok", "total_stock"),
}
REQUIRED_FIELDS = ("name", "minimum_requirement", "unit_cost")

CSV_SUFFIXES = (".csv",)
EXCEL_SUFFIXES = (".xlsx",)

TEMPLATE_ROWS = [
    {"nama_lokasi": "Kabupaten Cianjur", "kebutuhan_minimal": 500, "biaya_per_paket": 45000,
     "total_stok": 1000},
    {"nama_lokasi": "Kabupaten Sumedang", "kebutuhan_minimal": 350, "biaya_per_paket": 55000,
     "total_stok": None},
]


@dataclass(frozen=True)
class SiteDataset:
    """Sites read from a file, plus the stock figure if the file carried one."""

    sites: List[DemandSite]
    total_capacity: Optional[float] = None


def _normalize_header(header) -> str:
    return re.sub(r"[^a-z0-9]+", "_", str(header).strip().lower()).strip("_")


def _resolve_columns(frame: pd.DataFrame):
    normalized = {_normalize_header(col): col for col in frame.columns}
    resolved = {}
    for field, aliases in COLUMN_ALIASES.items():
        match = next((normalized[a] for a in aliases if a in normalized), None)
        if match is None and field in REQUIRED_FIELDS:
            raise InputError(
                f"Missing column for {field!r}; expected one of {', '.join(aliases)}"
            )
        resolved[field] = match
    return resolved


def sites_from_frame(frame: pd.DataFrame) -> List[DemandSite]:
    columns = _resolve_columns(frame)
    sites = []
    errors = []
    for position, record in enumerate(frame.to_dict("records")):
        row_num = position + 2  # header is line 1
        name = record[columns["name"]]
        if pd.isna(name) or not str(name).strip():
            errors.append(f"Row {row_num}: site name is empty")
            continue
        minimum = pd.to_numeric(record[columns["minimum_requirement"]], errors="coerce")
        cost = pd.to_numeric(record[columns["unit_cost"]], errors="coerce")
        if pd.isna(minimum) or minimum < 0:
            errors.append(f"Row {row_num}: minimum requirement must be a non-negative number")
            continue
        if pd.isna(cost) or cost < 0:
            errors.append(f"Row {row_num}: unit cost must be a non-negative number")
            continue
        sites.append(
            DemandSite(
                identifier=f"site-{len(sites) + 1}",
                name=str(name).strip(),
                minimum_requirement=float(minimum),
                unit_cost=float(cost),
            )
        )
    if errors:
        raise InputError("; ".join(errors))
    return sites


def stock_from_frame(frame: pd.DataFrame) -> Optional[float]:
    """Total stock from the first data row, or ``None`` if the file has none.

    Only the first row is read; the column is blank on the other rows.
    """
    column = _resolve_columns(frame)["total_capacity"]
    if column is None or frame.empty:
        return None
    value = frame[column].iloc[0]
    if pd.isna(value) or not str(value).strip():
        return None
    stock = pd.to_numeric(value, errors="coerce")
    if pd.isna(stock) or stock < 0:
        raise InputError(f"Row 2: total stock must be a non-negative number, got {value!r}")
    return float(stock)


def read_table(source, filename: Optional[str] = None) -> pd.DataFrame:
    """Read a CSV or Excel table from a path or file-like object.

    The format is picked from ``filename``, falling back to the source's own
    name. Unreadable files raise :class:`InputError`.
    """
    name = filename or getattr(source, "name", None) or str(source)
    suffix = Path(str(name)).suffix.lower()
    try:
        if suffix in EXCEL_SUFFIXES:
            return pd.read_excel(source)
        if suffix in CSV_SUFFIXES or not suffix:
            return pd.read_csv(source)
    except (ValueError, zipfile.BadZipFile) as exc:
        # pandas EmptyDataError and ParserError are both ValueErrors
        raise InputError(f"Could not read {name}: {exc}") from exc
    raise InputError(
        f"Unsupported file type {suffix!r}; use one of {', '.join(CSV_SUFFIXES + EXCEL_SUFFIXES)}"
    )


def load_dataset(source, filename: Optional[str] = None) -> SiteDataset:
    frame = read_table(source, filename)
    if frame.empty:
        raise InputError("The file has no data rows below the header")
    return SiteDataset(sites=sites_from_frame(frame), total_capacity=stock_from_frame(frame))


def load_sites_csv(path) -> List[DemandSite]:
    return sites_from_frame(read_table(path))


def problem_from_frame(frame: pd.DataFrame, total_capacity=None) -> ProblemInstance:
    """Build a problem; ``total_capacity`` falls back to the frame's stock column."""
    if total_capacity is None:
        total_capacity = stock_from_frame(frame)
        if total_capacity is None:
            raise InputError("No total stock given and the table has no total stock column")
    return build_problem(sites_from_frame(frame), total_capacity)


def template_frame() -> pd.DataFrame:
    return pd.DataFrame(TEMPLATE_ROWS)


def template_bytes(file_format: str = "csv") -> bytes:
    """Downloadable template in ``csv`` or ``xlsx`` format."""
    frame = template_frame()
    if file_format == "csv":
        return frame.to_csv(index=False).encode("utf-8")
    if file_format == "xlsx":
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            frame.to_excel(writer, sheet_name="Template", index=False)
        return buffer.getvalue()
    raise InputError(f"Unknown template format {file_format!r}")
