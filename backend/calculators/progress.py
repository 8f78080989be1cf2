"""
Project progress aggregator.

Each task scores by status (Done 1.0, In Progress 0.5, Delayed 0.25,
Not Started 0.0). A zone's fraction is the mean task score; the project's
overall progress is the unweighted mean of zone fractions, so a one-task
zone counts as much as a fifty-task zone.

Zone and overall percentages are both derived from the same unrounded
zone fraction. Rounding happens once, at the very end.

Input: zone / project snapshots as dicts ({"zones": [{"tasks": [{"status"}]}]})
       or ORM objects with the same attribute names
Output: integers in [0, 100]
"""

from .base import BaseCalculator

TASK_WEIGHTS = {
    "Done": 1.0,
    "In Progress": 0.5,
    "Delayed": 0.25,
    "Not Started": 0.0,
}


class ProgressAggregator(BaseCalculator):

    def calculate(self, project) -> dict:
        """
        Returns {"overall_progress": int, "zones": [int, ...]} with zone
        percentages in the same order as project zones.
        """
        zones = list(self.get_field(project, "zones") or [])
        fractions = [self.zone_fraction(zone) for zone in zones]
        return {
            "overall_progress": self._overall_from_fractions(fractions),
            "zones": [self.round_half_up(f * 100) for f in fractions],
        }

    def zone_fraction(self, zone) -> float:
        """Mean task weight, 0.0 for a zone with no tasks."""
        tasks = list(self.get_field(zone, "tasks") or [])
        if not tasks:
            return 0.0
        score = sum(self.task_weight(task) for task in tasks)
        return score / len(tasks)

    def task_weight(self, task) -> float:
        return self.lookup_rate(TASK_WEIGHTS, self.get_field(task, "status"), "task status")

    def zone_progress(self, zone) -> int:
        return self.round_half_up(self.zone_fraction(zone) * 100)

    def overall_progress(self, project) -> int:
        zones = list(self.get_field(project, "zones") or [])
        return self._overall_from_fractions([self.zone_fraction(z) for z in zones])

    def _overall_from_fractions(self, fractions: list) -> int:
        if not fractions:
            return 0
        return self.round_half_up(sum(fractions) / len(fractions) * 100)


_aggregator = ProgressAggregator()


def zone_fraction(zone) -> float:
    return _aggregator.zone_fraction(zone)


def compute_zone_progress(zone) -> int:
    """Zone completion percentage, 0-100."""
    return _aggregator.zone_progress(zone)


def compute_overall_progress(project) -> int:
    """Project completion percentage, 0-100. 0 when the project has no zones."""
    return _aggregator.overall_progress(project)


def compute_progress(project) -> dict:
    """Overall and per-zone percentages in one pass."""
    return _aggregator.calculate(project)
