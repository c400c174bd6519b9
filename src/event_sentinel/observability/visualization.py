"""
Visualization Module
====================

Generate the risk heatmap for map overlays.

This module generates PURELY DESCRIPTIVE artifacts.
Visualizations do NOT influence scoring or motion.

Weighting:
    - Agents scoring above the elevated threshold weigh 3
    - Everyone else weighs 1

NO ENGINE IMPORTS.
"""

import logging
import time
from typing import Sequence

import numpy as np

from event_sentinel.models.agent import Agent
from event_sentinel.models.output import RiskHeatmap


logger = logging.getLogger(__name__)


ELEVATED_WEIGHT = 3.0
BASE_WEIGHT = 1.0


class HeatmapGenerator:
    """
    Bins agent positions into an NxN risk-weighted grid.

    Attributes:
        width, height: Venue plane extent
        resolution: Grid cells per side
        elevated_score: Scores strictly above this weigh ELEVATED_WEIGHT
    """

    def __init__(
        self,
        width: float,
        height: float,
        resolution: int = 16,
        elevated_score: int = 45,
    ) -> None:
        """
        Initialize heatmap generator.

        Args:
            width: Venue plane width
            height: Venue plane height
            resolution: NxN grid resolution
            elevated_score: Elevated weighting threshold (exclusive)
        """
        self.width = width
        self.height = height
        self.resolution = resolution
        self.elevated_score = elevated_score
        logger.info(
            f"HeatmapGenerator initialized: {resolution}x{resolution} "
            f"over {width}x{height}"
        )

    def generate(self, agents: Sequence[Agent]) -> RiskHeatmap:
        """
        Build the heatmap for the current crowd.

        Args:
            agents: Agents after the latest tick

        Returns:
            RiskHeatmap (row 0 is the lowest y band)
        """
        start_time = time.time()
        n = self.resolution

        if agents:
            xs = np.array([a.position.x for a in agents], dtype=np.float64)
            ys = np.array([a.position.y for a in agents], dtype=np.float64)
            weights = np.array(
                [ELEVATED_WEIGHT if a.risk_score > self.elevated_score else BASE_WEIGHT for a in agents],
                dtype=np.float64,
            )
            # Points on or past the far edge land in the last cell
            grid, _, _ = np.histogram2d(
                np.clip(ys, 0, self.height),
                np.clip(xs, 0, self.width),
                bins=n,
                range=[[0, self.height], [0, self.width]],
                weights=weights,
            )
        else:
            grid = np.zeros((n, n), dtype=np.float64)

        elapsed_ms = (time.time() - start_time) * 1000
        if elapsed_ms > 50:
            logger.warning(f"Heatmap generation took {elapsed_ms:.1f}ms (>50ms threshold)")

        return RiskHeatmap(
            resolution=n,
            width=self.width,
            height=self.height,
            max_value=float(grid.max()) if grid.size else 0.0,
            grid=[[round(float(v), 3) for v in row] for row in grid],
        )
