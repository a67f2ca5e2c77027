"""Reading contact exports and writing match results (CSV, JSONL, XLSX)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd

from contactmatch.config import QueryConfig
from contactmatch.types import CandidateContact, MatchResult

_SUFFIXES = {".csv", ".jsonl", ".xlsx"}


def _check_suffix(path: Path) -> None:
    if path.suffix not in _SUFFIXES:
        raise ValueError(f"unsupported file type {path.suffix!r}, expected one of {sorted(_SUFFIXES)}")


def read_records(path: str | Path) -> list[dict[str, Any]]:
    """Read rows as dicts with blank cells as None. All values are strings."""
    path = Path(path)
    _check_suffix(path)

    if path.suffix == ".jsonl":
        records: list[dict[str, Any]] = []
        with path.open(encoding="utf-8") as f:
            for line in f:
                if line.strip():
                    records.append(json.loads(line))
        return records

    if path.suffix == ".xlsx":
        df = pd.read_excel(path, dtype=str)
    else:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, na_values=[""])

    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient="records")


def read_candidates(
    path: str | Path,
    query_config: QueryConfig | None = None,
) -> list[CandidateContact]:
    """Read a contact export into candidates. Rows without an Id are skipped."""
    candidates: list[CandidateContact] = []
    for record in read_records(path):
        try:
            candidates.append(CandidateContact.from_record(record, query_config))
        except KeyError:
            continue
    return candidates


def result_row(result: MatchResult | None, **extra: Any) -> dict[str, Any]:
    """Flatten a match result into a single output row."""
    row: dict[str, Any] = dict(extra)
    if result is None:
        row.update({
            "contact_id": None,
            "contact_name": None,
            "confidence_score": 0,
            "matched_fields": "",
            "fields_to_update": "",
        })
        return row
    row.update({
        "contact_id": result.contact_id,
        "contact_name": result.contact_name,
        "confidence_score": result.confidence_score,
        "matched_fields": "|".join(result.matched_fields),
        "fields_to_update": json.dumps(result.fields_to_update) if result.fields_to_update else "",
    })
    return row


def write_rows(rows: list[dict[str, Any]], path: str | Path) -> None:
    """Write result rows to CSV, JSONL or XLSX based on suffix."""
    path = Path(path)
    _check_suffix(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix == ".jsonl":
        with path.open("w", encoding="utf-8") as f:
            for row in rows:
                f.write(json.dumps(row) + "\n")
        return

    df = pd.DataFrame(rows)
    if path.suffix == ".xlsx":
        df.to_excel(path, index=False)
    else:
        df.to_csv(path, index=False)
