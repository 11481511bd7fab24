"""
Kinetic Projection Service

Turns a session's mean segment energies into bat-speed and exit-velocity
estimates: what the swing currently delivers, and the ceiling if energy
reached the bat at the target efficiency.

Bat speed scales with the square root of delivered energy. When no bat
sensor is present, delivered energy is approximated as arms energy times
the torso→arms transfer ratio.
"""

import logging
import math
from typing import Optional

from ..config import DEFAULT_CONFIG, ProjectionConstants
from ..domain.motion import SessionFeatureSet, Segment
from ..domain.scoring import KineticProjections, LeakType
from .scorer import round_half_up

logger = logging.getLogger(__name__)


# Alternate spellings accepted for a player level
LEVEL_ALIASES = {
    "high_school": "hs",
    "highschool": "hs",
    "mlb": "pro",
}

# Proxy efficiency (no total energy) is capped here
PROXY_EFFICIENCY_CAP_PCT = 60.0


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


class KineticProjector:
    """
    Projects bat speed and exit velocity for a scored session.

    Usage:
        projector = KineticProjector(config.projections)
        projections = projector.project(features, LeakType.EARLY_ARMS, "college")
        print(f"{projections.mph_left_on_table} mph left on the table")
    """

    def __init__(self, constants: ProjectionConstants = DEFAULT_CONFIG.projections):
        self.constants = constants

    # -------------------------------------------------------------------------
    # Player level
    # -------------------------------------------------------------------------

    def resolve_level(self, level: Optional[str]) -> Optional[str]:
        """
        Canonical level name, the default for None, or None when unknown.
        """
        if level is None or not str(level).strip():
            return self.constants.default_level

        key = str(level).strip().lower().replace(" ", "_").replace("-", "_")
        key = LEVEL_ALIASES.get(key, key)
        return key if key in self.constants.bat_speed_mph else None

    # -------------------------------------------------------------------------
    # Projection
    # -------------------------------------------------------------------------

    def project(
        self,
        features: SessionFeatureSet,
        leak_type: LeakType,
        level: Optional[str] = None,
    ) -> KineticProjections:
        """
        Project current and ceiling bat speed / exit velocity.

        Args:
            features: Aggregated session features
            leak_type: Classified leak; a bat-delivery leak widens the ceiling
            level: Player level (youth, hs, college, pro); unknown or
                   missing levels use the configured default

        Returns:
            KineticProjections (has_projections=False for an empty session)
        """
        c = self.constants
        resolved = self.resolve_level(level) or c.default_level

        if features.is_empty:
            return KineticProjections(
                player_level=resolved,
                potential_delivery_efficiency_pct=c.target_delivery_efficiency_pct,
            )

        avg_bat = features.mean_peak[Segment.BAT]
        avg_arms = features.mean_peak[Segment.ARMS]
        avg_total = features.mean_peak[Segment.TOTAL]
        transfer_pct = features.mean_torso_to_arms * 100

        if features.has_bat_energy and avg_bat > 0:
            delivered = avg_bat
            efficiency = avg_bat / avg_total * 100 if avg_total > 0 else 0.0
        else:
            delivered = avg_arms * transfer_pct / 100
            if avg_total > 0:
                efficiency = delivered / avg_total * 100
            else:
                efficiency = _clamp(transfer_pct * 0.5, 0.0, PROXY_EFFICIENCY_CAP_PCT)

        potential = avg_total * c.target_delivery_efficiency_pct / 100

        current = c.k_bat_speed * math.sqrt(max(delivered, 0.0))
        ceiling = c.k_bat_speed * math.sqrt(max(potential, delivered, 0.0))

        if leak_type == LeakType.NO_BAT_DELIVERY or efficiency < c.severe_efficiency_pct:
            ceiling = max(ceiling, current + c.severe_headroom_mph)
        elif efficiency < c.moderate_efficiency_pct:
            ceiling = max(ceiling, current + c.moderate_headroom_mph)

        band = c.bat_speed_mph[resolved]
        bat_current = round_half_up(_clamp(round_half_up(current), band.min, band.max))
        bat_ceiling = round_half_up(_clamp(round_half_up(ceiling), bat_current, band.max))

        ev_band = c.exit_velo_current
        ev_current = round_half_up(_clamp(
            round_half_up(c.exit_velo_slope * bat_current + c.exit_velo_offset),
            ev_band.min, ev_band.max,
        ))
        ev_ceiling = round_half_up(_clamp(
            round_half_up(c.exit_velo_slope * bat_ceiling + c.exit_velo_offset),
            ev_current, c.exit_velo_ceiling_max,
        ))

        projections = KineticProjections(
            player_level=resolved,
            bat_speed_current_mph=bat_current,
            bat_speed_ceiling_mph=bat_ceiling,
            exit_velo_current_mph=ev_current,
            exit_velo_ceiling_mph=ev_ceiling,
            delivery_efficiency_pct=round_half_up(efficiency * 10) / 10,
            potential_delivery_efficiency_pct=c.target_delivery_efficiency_pct,
            has_projections=True,
        )
        logger.debug(
            f"Projected {bat_current}-{bat_ceiling} mph bat speed "
            f"({resolved}, {projections.delivery_efficiency_pct}% delivery)"
        )
        return projections
