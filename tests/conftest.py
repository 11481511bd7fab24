"""Shared fixtures for the 4B scoring tests.

Synthetic swings have 12 rows spread across the action window, with every
segment sitting at half its peak except on the row chosen for its peak.
"""

from pathlib import Path

import pytest

from core.domain import MotionRow, Segment

PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"

# 12 offsets from -0.44 s to 0.00 s, all inside the default window
ROW_TIMES = [round(-0.44 + 0.04 * i, 2) for i in range(12)]

CSV_COLUMNS = [
    "org_movement_id",
    "time_from_max_hand",
    "legs_kinetic_energy",
    "torso_kinetic_energy",
    "arms_kinetic_energy",
    "bat_kinetic_energy",
    "total_kinetic_energy",
]

# (legs, torso, arms, bat, total) peaks of the three reference swings
EXAMPLE_PEAKS = [
    (200.0, 100.0, 150.0, 300.0, 550.0),
    (220.0, 110.0, 140.0, 310.0, 580.0),
    (210.0, 105.0, 145.0, 305.0, 565.0),
]


def build_swing(
    swing_id: str,
    legs: float = 200.0,
    torso: float = 100.0,
    arms: float = 150.0,
    bat: float = 300.0,
    total: float = 550.0,
    legs_idx: int = 4,
    torso_idx: int = 5,
    arms_idx: int = 7,
    bat_idx: int = 9,
    total_idx: int = 8,
    n_rows: int = 12,
) -> list[MotionRow]:
    peaks = {
        Segment.LEGS: (legs, legs_idx),
        Segment.TORSO: (torso, torso_idx),
        Segment.ARMS: (arms, arms_idx),
        Segment.BAT: (bat, bat_idx),
        Segment.TOTAL: (total, total_idx),
    }
    rows = []
    for i, t in enumerate(ROW_TIMES[:n_rows]):
        energy = {
            segment: peak if i == idx else peak * 0.5
            for segment, (peak, idx) in peaks.items()
        }
        rows.append(MotionRow(swing_id=swing_id, time_offset=t, energy=energy))
    return rows


def rows_to_csv(rows: list[MotionRow]) -> str:
    lines = [",".join(CSV_COLUMNS)]
    for row in rows:
        values = [row.swing_id, str(row.time_offset)]
        values += [str(row.energy_of(s)) for s in Segment]
        lines.append(",".join(values))
    return "\n".join(lines) + "\n"


def rows_to_records(rows: list[MotionRow]) -> list[dict]:
    records = []
    for row in rows:
        record = {"org_movement_id": row.swing_id, "time_from_max_hand": row.time_offset}
        for segment in Segment:
            record[f"{segment.value}_kinetic_energy"] = row.energy_of(segment)
        records.append(record)
    return records


@pytest.fixture
def swing():
    """Factory building the rows of one synthetic swing."""
    return build_swing


@pytest.fixture
def to_csv():
    return rows_to_csv


@pytest.fixture
def to_records():
    return rows_to_records


@pytest.fixture
def example_rows() -> list[MotionRow]:
    """Three properly sequenced swings with credible bat energy."""
    rows = []
    for i, (legs, torso, arms, bat, total) in enumerate(EXAMPLE_PEAKS, start=1):
        rows.extend(build_swing(f"swing-{i}", legs, torso, arms, bat, total))
    return rows


@pytest.fixture
def example_csv(example_rows) -> str:
    return rows_to_csv(example_rows)


@pytest.fixture
def drills_path() -> Path:
    return CONFIG_DIR / "drill_prescriptions.yaml"


@pytest.fixture
def scoring_config_path() -> Path:
    return CONFIG_DIR / "scoring.yaml"
