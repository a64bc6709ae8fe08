from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    base_placement_points: int = 10
    line_clear_points: int = 50
    points_per_level: int = 100

    def score_for_lines(self, lines: int) -> int:
        if lines <= 0:
            return 0
        return lines * self.line_clear_points

    def level_for_score(self, score: int) -> int:
        return score // self.points_per_level + 1
