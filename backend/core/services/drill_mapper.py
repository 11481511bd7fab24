"""
Drill Mapper Service

Looks up corrective drills for a session's (leak type, motor profile,
weakest category) in an externally supplied prescription table.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

import yaml

from ..domain.scoring import DrillPrescription, FourBCategory, LeakType, MotorProfile

logger = logging.getLogger(__name__)


MAX_RECOMMENDATIONS = 3


class DrillTableError(ValueError):
    """Raised when a drill-prescription table is malformed."""


def _parse_enum(enum_cls, value: Any, field_name: str, drill_id: str):
    if value is None or value == "":
        return None
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise DrillTableError(
            f"Drill {drill_id}: unknown {field_name} '{value}' (expected one of: {allowed})"
        ) from None


_TRUE_STRINGS = {"true", "yes", "y", "1", "on"}
_FALSE_STRINGS = {"false", "no", "n", "0", "off"}


def _parse_bool(value: Any, field_name: str, drill_id: str, default: bool = True) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    raise DrillTableError(f"Drill {drill_id}: {field_name} must be a boolean, got '{value}'")


def prescription_from_record(record: Mapping[str, Any]) -> DrillPrescription:
    """Validate one table row and build a DrillPrescription."""
    drill_id = str(record.get("drill_id") or "").strip()
    if not drill_id:
        raise DrillTableError(f"Drill row without drill_id: {dict(record)}")

    try:
        priority = int(record.get("priority", 10))
    except (TypeError, ValueError):
        raise DrillTableError(f"Drill {drill_id}: priority must be an integer") from None
    if priority < 1:
        raise DrillTableError(f"Drill {drill_id}: priority must be >= 1, got {priority}")

    return DrillPrescription(
        drill_id=drill_id,
        name=str(record.get("name") or drill_id),
        priority=priority,
        leak_type=_parse_enum(LeakType, record.get("leak_type"), "leak_type", drill_id),
        motor_profile=_parse_enum(MotorProfile, record.get("motor_profile"), "motor_profile", drill_id),
        four_b_weakness=_parse_enum(
            FourBCategory, record.get("four_b_weakness"), "four_b_weakness", drill_id
        ),
        reason=str(record.get("reason") or record.get("prescription_reason") or ""),
        is_active=_parse_bool(record.get("is_active", True), "is_active", drill_id),
    )


class DrillMapper:
    """
    Thin join against the prescription table.

    A row matches when ANY of its keys equals the session's leak type,
    motor profile or weakest category. Inactive rows are skipped; results
    are ordered by (priority, drill_id) and capped at three.

    Usage:
        mapper = DrillMapper.from_yaml("config/drill_prescriptions.yaml")
        drills = mapper.recommend(LeakType.LATE_LEGS, MotorProfile.SPINNER, FourBCategory.BODY)
    """

    def __init__(self, prescriptions: Iterable[DrillPrescription] = ()):
        self.prescriptions = tuple(prescriptions)

    def __len__(self) -> int:
        return len(self.prescriptions)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "DrillMapper":
        prescriptions = []
        seen = set()
        for record in records:
            if not isinstance(record, Mapping):
                raise DrillTableError(f"Drill row must be a mapping, got {type(record).__name__}")
            prescription = prescription_from_record(record)
            if prescription.drill_id in seen:
                raise DrillTableError(f"Duplicate drill_id: {prescription.drill_id}")
            seen.add(prescription.drill_id)
            prescriptions.append(prescription)
        return cls(prescriptions)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "DrillMapper":
        """
        Load a table from YAML: either a list of rows or ``{drills: [...]}``.

        Raises:
            DrillTableError: If the file is missing, unparseable or invalid
        """
        path = Path(path)
        if not path.exists():
            raise DrillTableError(f"Drill table not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or []
        except yaml.YAMLError as e:
            raise DrillTableError(f"Could not parse {path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("drills", [])
        if not isinstance(data, list):
            raise DrillTableError(f"{path} must contain a list of drills")

        mapper = cls.from_records(data)
        logger.info(f"Loaded {len(mapper)} drill prescriptions from {path}")
        return mapper

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def recommend(
        self,
        leak_type: LeakType,
        motor_profile: MotorProfile,
        weakest: FourBCategory,
        limit: Optional[int] = MAX_RECOMMENDATIONS,
    ) -> list[DrillPrescription]:
        matches = [
            p for p in self.prescriptions
            if p.is_active and p.matches(leak_type, motor_profile, weakest)
        ]
        matches.sort(key=lambda p: (p.priority, p.drill_id))
        return matches[:limit] if limit is not None else matches
