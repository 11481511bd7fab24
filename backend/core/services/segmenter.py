"""
Swing Segmenter Service

Groups motion rows by swing and trims each swing to the action window
around the reference event (peak hand speed).
"""

import logging
from collections import defaultdict
from typing import Iterable

from ..config import ActionWindow, DEFAULT_CONFIG
from ..domain.motion import MotionRow, SwingWindow

logger = logging.getLogger(__name__)


class SwingSegmenter:
    """
    Splits a session's rows into per-swing windows.

    A swing survives only if at least ``min_rows`` of its rows fall
    inside the window; sparse swings are dropped, not reported as errors.

    Usage:
        segmenter = SwingSegmenter()
        windows = segmenter.segment(rows)
    """

    def __init__(
        self,
        window: ActionWindow = DEFAULT_CONFIG.action_window,
        min_rows: int = DEFAULT_CONFIG.min_rows_per_swing,
    ):
        self.window = window
        self.min_rows = min_rows

    def segment(self, rows: Iterable[MotionRow]) -> list[SwingWindow]:
        """
        Window every swing in the session.

        Args:
            rows: Parsed rows in any order

        Returns:
            Surviving swings sorted by swing id, each with its in-window
            rows sorted by time offset
        """
        groups: dict[str, list[MotionRow]] = defaultdict(list)
        for row in rows:
            if self.window.contains(row.time_offset):
                groups[row.swing_id].append(row)
            else:
                # Keep the key so out-of-window swings are counted as dropped
                groups.setdefault(row.swing_id, [])

        windows = []
        for swing_id in sorted(groups):
            in_window = groups[swing_id]
            if len(in_window) < self.min_rows:
                logger.debug(
                    f"Dropping swing {swing_id}: {len(in_window)} rows in window "
                    f"(need {self.min_rows})"
                )
                continue

            ordered = sorted(in_window, key=self._row_order)
            windows.append(SwingWindow(swing_id=swing_id, rows=tuple(ordered)))

        logger.info(f"Segmented {len(windows)} of {len(groups)} swings")
        return windows

    @staticmethod
    def _row_order(row: MotionRow) -> tuple:
        # Energies break time ties so duplicate timestamps order the same
        # way regardless of delivery order
        return (row.time_offset, tuple(sorted((s.value, e) for s, e in row.energy.items())))
