import pytest

from falling_blocks.game import ProgressionRules, ScoringRules


@pytest.mark.parametrize("lines,points", [(1, 100), (2, 300), (3, 500), (4, 800)])
def test_line_clear_table(lines, points):
    assert ScoringRules().score_for_lock(lines) == points


def test_lock_without_clear_scores_placement_bonus():
    assert ScoringRules().score_for_lock(0) == 5


def test_counts_outside_table_score_nothing():
    rules = ScoringRules()
    assert rules.score_for_lines(5) == 0
    assert rules.score_for_lock(6) == 0
    assert rules.score_for_lines(-1) == 0


def test_progression_interval_floors_at_minimum():
    rules = ProgressionRules()
    assert rules.interval_after(0) == 400
    assert rules.interval_after(1) == 380
    assert rules.interval_after(15) == 100
    assert rules.interval_after(30) == 100
