"""
Motion CSV Parser Service

Turns a momentum-energy export (raw CSV text or pre-parsed records) into
typed MotionRow objects.

Exports are messy: quoted headers, mixed case, missing cells, truncated
lines and the occasional "n/a" swing id. Nothing here raises on bad
telemetry - bad rows are dropped and counted.
"""

import io
import logging
import re
from typing import Any, Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from ..domain.motion import MotionRow, Segment

logger = logging.getLogger(__name__)


# Column names tried, in order, for the swing-group key and time offset
SWING_ID_COLUMNS = ("org_movement_id", "swing_id", "movement_id")
TIME_OFFSET_COLUMNS = ("time_from_max_hand", "time_offset")

# Fallback chain per segment: each entry is a group of columns that are
# summed; the first group present with a non-zero value wins.
SEGMENT_COLUMNS: dict[Segment, tuple[tuple[str, ...], ...]] = {
    Segment.LEGS: (("legs_kinetic_energy",),),
    Segment.TORSO: (("torso_kinetic_energy",),),
    Segment.ARMS: (
        ("arms_kinetic_energy",),
        ("larm_kinetic_energy", "rarm_kinetic_energy"),
    ),
    Segment.BAT: (("bat_kinetic_energy",),),
    Segment.TOTAL: (("total_kinetic_energy",),),
}

_WHITESPACE = re.compile(r"\s+")


def normalize_header(name: str) -> str:
    """Lower-case a header, strip quotes and turn whitespace runs into underscores."""
    cleaned = str(name).strip().strip('"').strip("'").strip()
    return _WHITESPACE.sub("_", cleaned).lower()


def is_numeric_column(name: str) -> bool:
    """Energy and time-offset columns are parsed as floats."""
    return "kinetic_energy" in name or "time_from" in name


class MotionCsvParser:
    """
    Parses momentum-energy exports into MotionRow sequences.

    Usage:
        parser = MotionCsvParser()

        rows = parser.parse_text(csv_text)
        rows = parser.parse_records([{"org_movement_id": "s1", ...}])
    """

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def parse_text(self, text: str) -> list[MotionRow]:
        """
        Parse raw CSV text with a header line.

        Args:
            text: Comma-separated export; values may be quoted

        Returns:
            Parsed rows (empty for empty or header-only input)
        """
        if not text or not text.strip():
            return []

        try:
            df = pd.read_csv(
                io.StringIO(text),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                on_bad_lines="skip",
            )
        except pd.errors.EmptyDataError:
            return []
        except pd.errors.ParserError as e:
            logger.warning(f"Motion CSV could not be parsed: {e}")
            return []

        return self._rows_from_frame(df)

    def parse_records(self, records: Iterable[Mapping[str, Any]]) -> list[MotionRow]:
        """
        Parse already-split records (e.g. JSON rows from an API payload).

        Keys get the same header normalization as CSV columns.
        """
        cleaned = [
            {key: "" if value is None else str(value) for key, value in record.items()}
            for record in records
        ]
        if not cleaned:
            return []

        df = pd.DataFrame(cleaned)
        return self._rows_from_frame(df)

    # -------------------------------------------------------------------------
    # Frame → rows
    # -------------------------------------------------------------------------

    def _rows_from_frame(self, df: pd.DataFrame) -> list[MotionRow]:
        df = df.fillna("")
        df.columns = [normalize_header(c) for c in df.columns]
        df = df.loc[:, ~df.columns.duplicated()]

        id_col = self._find_swing_id_column(df.columns)
        time_col = self._find_time_column(df.columns)
        if id_col is None or time_col is None:
            logger.warning(
                f"Motion export lacks a swing id or time offset column "
                f"(columns: {list(df.columns)[:10]})"
            )
            return []

        swing_ids = df[id_col].astype(str).str.strip()
        time_present = df[time_col].astype(str).str.strip() != ""
        id_present = (swing_ids != "") & (swing_ids.str.lower() != "n/a")
        keep = id_present & time_present

        dropped = int((~keep).sum())
        if dropped:
            logger.debug(f"Dropped {dropped} of {len(df)} rows without swing id or time offset")

        df = df[keep].copy()
        df[id_col] = swing_ids[keep]

        numeric_cols = [c for c in df.columns if is_numeric_column(c) or c == time_col]
        for col in numeric_cols:
            values = pd.to_numeric(df[col].astype(str).str.strip(), errors="coerce")
            # Overflowing literals ("1e400") and "inf" count as unparseable
            df[col] = values.replace([np.inf, -np.inf], np.nan).fillna(0.0)

        text_cols = [c for c in df.columns if c not in numeric_cols and c != id_col]
        chains = self._present_chains(df.columns)

        rows = []
        for record in df.to_dict("records"):
            energy = {
                segment: self._resolve_energy(record, chain)
                for segment, chain in chains.items()
            }
            rows.append(MotionRow(
                swing_id=record[id_col],
                time_offset=float(record[time_col]),
                energy=energy,
                extras={c: record[c] for c in text_cols},
            ))

        return rows

    @staticmethod
    def _find_swing_id_column(columns: Iterable[str]) -> Optional[str]:
        columns = list(columns)
        for candidate in SWING_ID_COLUMNS:
            if candidate in columns:
                return candidate
        return None

    @staticmethod
    def _find_time_column(columns: Iterable[str]) -> Optional[str]:
        columns = list(columns)
        for candidate in TIME_OFFSET_COLUMNS:
            if candidate in columns:
                return candidate
        return next((c for c in columns if c.startswith("time_from")), None)

    @staticmethod
    def _present_chains(columns: Iterable[str]) -> dict[Segment, list[tuple[str, ...]]]:
        """Keep only the column groups the export actually carries."""
        columns = set(columns)
        chains = {}
        for segment, groups in SEGMENT_COLUMNS.items():
            present = [
                tuple(c for c in group if c in columns)
                for group in groups
                if any(c in columns for c in group)
            ]
            if present:
                chains[segment] = present
        return chains

    @staticmethod
    def _resolve_energy(record: Mapping[str, Any], chain: list[tuple[str, ...]]) -> float:
        """First non-zero group in the chain; negative readings clamp to 0."""
        fallback = 0.0
        for i, group in enumerate(chain):
            value = max(sum(float(record[c]) for c in group), 0.0)
            if value > 0:
                return value
            if i == 0:
                fallback = value
        return fallback
