"""
Progress aggregator tests: zone and overall completion percentages.
"""

from types import SimpleNamespace

import pytest

from backend.calculators.base import CalculatorInputError
from backend.calculators.progress import (
    ProgressAggregator,
    compute_overall_progress,
    compute_progress,
    compute_zone_progress,
    zone_fraction,
)
from backend.models import TaskStatus


def _zone(*statuses):
    return {"tasks": [{"status": s} for s in statuses]}


# --- Zone progress ---

def test_zone_without_tasks_is_zero():
    assert compute_zone_progress({"tasks": []}) == 0
    assert compute_zone_progress({}) == 0


def test_zone_all_done_is_100():
    assert compute_zone_progress(_zone("Done", "Done", "Done")) == 100


def test_zone_mixed_statuses():
    # 1.0 + 0.5 + 0.0 = 1.5 / 3 = 0.5
    assert compute_zone_progress(_zone("Done", "In Progress", "Not Started")) == 50


def test_delayed_counts_quarter():
    assert compute_zone_progress(_zone("Delayed")) == 25
    assert compute_zone_progress(_zone("Not Started")) == 0


def test_zone_rounds_half_up():
    # 0.25 / 2 = 0.125 -> 12.5 -> 13 (banker's rounding would give 12)
    assert compute_zone_progress(_zone("Delayed", "Not Started")) == 13


def test_zone_fraction_is_unrounded():
    assert zone_fraction(_zone("Done", "Not Started", "Not Started")) == pytest.approx(1 / 3)


def test_enum_statuses_accepted():
    zone = _zone(TaskStatus.DONE, TaskStatus.IN_PROGRESS)
    assert compute_zone_progress(zone) == 75


def test_unknown_status_fails_fast():
    with pytest.raises(CalculatorInputError, match="Unknown task status: 'Blocked'"):
        compute_zone_progress(_zone("Done", "Blocked"))


# --- Overall progress ---

def test_project_without_zones_is_zero():
    assert compute_overall_progress({"zones": []}) == 0
    assert compute_overall_progress({}) == 0


def test_empty_zone_counts_as_zero_in_average():
    project = {"zones": [_zone("Done"), _zone()]}
    assert compute_overall_progress(project) == 50


def test_zones_are_not_weighted_by_task_count():
    project = {"zones": [_zone("Done"), _zone(*(["Not Started"] * 50))]}
    assert compute_overall_progress(project) == 50


def test_overall_uses_unrounded_zone_fractions():
    # Zone fractions 0.125 and 0.0 -> mean 0.0625 -> 6.
    # Averaging the rounded zone figures (13, 0) would give 7.
    project = {"zones": [_zone("Delayed", "Not Started"), _zone("Not Started")]}
    assert compute_overall_progress(project) == 6


def test_compute_progress_returns_zone_and_overall_figures():
    project = {"zones": [_zone("Done", "In Progress", "Not Started"), _zone("Done"), _zone()]}
    result = compute_progress(project)
    assert result["zones"] == [50, 100, 0]
    assert result["overall_progress"] == 50


def test_progress_always_within_bounds():
    statuses = ["Done", "In Progress", "Delayed", "Not Started"]
    for i in range(len(statuses)):
        for j in range(len(statuses)):
            project = {"zones": [_zone(statuses[i]), _zone(statuses[i], statuses[j])]}
            result = compute_progress(project)
            assert 0 <= result["overall_progress"] <= 100
            assert all(0 <= z <= 100 for z in result["zones"])


def test_attribute_style_objects():
    """ORM rows expose .zones / .tasks / .status, same results as dicts."""
    project = SimpleNamespace(zones=[
        SimpleNamespace(tasks=[SimpleNamespace(status=TaskStatus.DONE),
                               SimpleNamespace(status=TaskStatus.DELAYED)]),
    ])
    aggregator = ProgressAggregator()
    assert aggregator.zone_progress(project.zones[0]) == 63  # 0.625 -> 62.5 -> 63
    assert aggregator.overall_progress(project) == 63
