"""Tests for bat-speed and exit-velocity projections.

Covers:
  - Delivered energy from the bat sensor or the arms proxy
  - Ceiling headroom for inefficient or bat-less deliveries
  - Player-level clamping and level names
  - Empty sessions
  - Projections flowing through SessionScorer
"""

import pytest

from core.config import Band, ProjectionConstants
from core.domain import DataQuality, LeakType, Segment, SessionFeatureSet
from core.services import DrillMapper, KineticProjector, SessionScorer


def _session(bat=300.0, arms=150.0, total=550.0, has_bat=True, **overrides) -> SessionFeatureSet:
    mean_peak = {s: 100.0 for s in Segment}
    mean_peak.update({Segment.BAT: bat, Segment.ARMS: arms, Segment.TOTAL: total})
    values = dict(
        swing_count=5,
        data_quality=DataQuality.GOOD,
        mean_peak=mean_peak,
        cv_peak={s: 10.0 for s in Segment},
        mean_legs_to_torso=0.5,
        mean_torso_to_arms=1.2,
        mean_total_efficiency=0.5,
        has_bat_energy=has_bat,
        no_bat_fraction=0.0,
        late_legs_fraction=0.0,
        torso_bypass_fraction=0.0,
        proper_sequence_fraction=1.0,
        mean_legs_torso_gap_ms=40.0,
    )
    values.update(overrides)
    return SessionFeatureSet(**values)


@pytest.fixture
def projector():
    return KineticProjector()


# ============================================================================
# Test: Delivered energy
# ============================================================================

class TestDeliveredEnergy:

    def test_bat_sensor(self, projector):
        p = projector.project(_session(bat=305.0, total=565.0), LeakType.CLEAN_TRANSFER)

        assert p.has_projections
        assert p.player_level == "hs"
        assert (p.bat_speed_current_mph, p.bat_speed_ceiling_mph) == (74, 75)
        assert (p.exit_velo_current_mph, p.exit_velo_ceiling_mph) == (98, 99)
        assert p.delivery_efficiency_pct == pytest.approx(54.0)
        assert p.potential_delivery_efficiency_pct == pytest.approx(55.0)
        assert p.mph_left_on_table == 1

    def test_arms_proxy_without_bat(self, projector):
        # 100 J arms * 120% transfer = 120 J delivered, 24% of total
        p = projector.project(
            _session(bat=0.0, arms=100.0, total=500.0, has_bat=False),
            LeakType.NO_BAT_DELIVERY,
        )

        assert p.delivery_efficiency_pct == pytest.approx(24.0)
        assert (p.bat_speed_current_mph, p.bat_speed_ceiling_mph) == (55, 70)
        assert (p.exit_velo_current_mph, p.exit_velo_ceiling_mph) == (74, 93)
        assert p.mph_left_on_table == 15

    def test_proxy_efficiency_without_total_energy(self, projector):
        p = projector.project(
            _session(bat=0.0, arms=100.0, total=0.0, has_bat=False, mean_torso_to_arms=1.5),
            LeakType.NO_BAT_DELIVERY,
        )

        # Half the transfer percentage, capped at 60
        assert p.delivery_efficiency_pct == pytest.approx(60.0)
        assert p.bat_speed_current_mph == 55

    def test_ceiling_never_below_current(self, projector):
        # Bat already delivers more than the target share of total
        p = projector.project(_session(bat=300.0, total=320.0), LeakType.CLEAN_TRANSFER)

        assert p.bat_speed_current_mph == 74
        assert p.bat_speed_ceiling_mph == 74
        assert p.mph_left_on_table == 0


# ============================================================================
# Test: Ceiling headroom
# ============================================================================

class TestCeilingHeadroom:

    def test_bat_delivery_leak_adds_headroom(self, projector):
        p = projector.project(_session(bat=300.0, total=320.0), LeakType.NO_BAT_DELIVERY)

        assert p.bat_speed_current_mph == 74
        assert p.bat_speed_ceiling_mph == 84
        assert p.mph_left_on_table == 10

    def test_moderate_inefficiency_adds_headroom(self):
        wide = ProjectionConstants(bat_speed_mph={"hs": Band(min=0, max=200)})
        p = KineticProjector(wide).project(_session(bat=40.0, total=100.0), LeakType.EARLY_ARMS)

        # 40% efficiency: ceiling is at least current + 6
        assert p.bat_speed_current_mph == 27
        assert p.bat_speed_ceiling_mph == 33


# ============================================================================
# Test: Player levels
# ============================================================================

class TestPlayerLevels:

    def test_youth_band_caps_projections(self, projector):
        p = projector.project(_session(bat=600.0, total=700.0), LeakType.CLEAN_TRANSFER, "youth")

        assert (p.bat_speed_current_mph, p.bat_speed_ceiling_mph) == (85, 85)
        assert (p.exit_velo_current_mph, p.exit_velo_ceiling_mph) == (111, 111)

    def test_exit_velocity_caps(self, projector):
        p = projector.project(_session(bat=600.0, total=700.0), LeakType.CLEAN_TRANSFER, "pro")

        assert p.bat_speed_current_mph == 104
        assert p.exit_velo_current_mph == 115
        assert p.exit_velo_ceiling_mph == 120

    @pytest.mark.parametrize("level,expected", [
        (None, "hs"),
        ("", "hs"),
        ("HS", "hs"),
        ("High School", "hs"),
        ("high-school", "hs"),
        ("MLB", "pro"),
        ("college", "college"),
        ("varsity", None),
    ])
    def test_resolve_level(self, projector, level, expected):
        assert projector.resolve_level(level) == expected

    def test_unknown_level_projects_as_default(self, projector):
        p = projector.project(_session(), LeakType.CLEAN_TRANSFER, "varsity")
        assert p.player_level == "hs"


# ============================================================================
# Test: Empty sessions
# ============================================================================

class TestEmptySession:

    def test_no_projections(self, projector):
        p = projector.project(
            _session(swing_count=0, data_quality=DataQuality.INSUFFICIENT),
            LeakType.INSUFFICIENT_DATA,
        )

        assert not p.has_projections
        assert p.bat_speed_current_mph == 0
        assert p.exit_velo_ceiling_mph == 0
        assert p.mph_left_on_table == 0
        assert p.potential_delivery_efficiency_pct == pytest.approx(55.0)
        assert p.to_metrics() == {}


# ============================================================================
# Test: Session scorer
# ============================================================================

class TestSessionProjections:

    @pytest.fixture
    def scorer(self, drills_path):
        return SessionScorer(drill_mapper=DrillMapper.from_yaml(drills_path))

    def test_example_session(self, scorer, example_csv):
        result = scorer.score_csv("example", example_csv)

        assert result.projections.bat_speed_current_mph == 74
        assert result.projections.bat_speed_ceiling_mph == 75
        assert result.raw_metrics["bat_speed_current_mph"] == 74
        assert result.raw_metrics["mph_left_on_table"] == 1
        assert result.to_dict()["projections"]["exit_velo_current_mph"] == 98

    def test_player_level_is_passed_through(self, scorer, example_rows):
        result = scorer.score_rows("example", example_rows, player_level="college")

        assert result.projections.player_level == "college"
        assert result.warnings == ()

    def test_unknown_level_is_warned(self, scorer, example_csv):
        result = scorer.score_csv("example", example_csv, player_level="varsity")

        assert result.projections.player_level == "hs"
        assert "Unknown player level 'varsity' - projecting as hs" in result.warnings

    def test_empty_session(self, scorer):
        result = scorer.score_csv("empty", "")

        assert not result.projections.has_projections
        assert "bat_speed_current_mph" not in result.raw_metrics
