from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    placement_score: int = 5

    def score_for_lines(self, lines: int) -> int:
        if 1 <= lines <= len(self.line_clear_scores):
            return self.line_clear_scores[lines - 1]
        # Counts outside the table score nothing
        return 0

    def score_for_lock(self, lines: int) -> int:
        if lines == 0:
            return self.placement_score
        return self.score_for_lines(lines)


@dataclass
class ProgressionRules:
    """Timed variant: gravity speeds up on a fixed cadence until the session cap."""

    base_interval_ms: int = 400
    interval_step_ms: int = 20
    ramp_every_ms: int = 5000
    min_interval_ms: int = 100
    session_cap_ms: int = 150_000

    def interval_after(self, ramp_count: int) -> int:
        interval = self.base_interval_ms - ramp_count * self.interval_step_ms
        return max(self.min_interval_ms, interval)
