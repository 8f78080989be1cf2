"""
Persistence path for the project aggregate.

Every write of a project goes through save_project(). It recomputes zone
progress and overall_progress from the current task statuses right before
the commit, whatever field the caller changed, so the stored figures can
never lag the tasks they summarise.

There is no optimistic locking: two concurrent requests touching the same
project are last-writer-wins.
"""

import logging

from sqlalchemy.orm import Session

from . import models
from .calculators.progress import ProgressAggregator

logger = logging.getLogger(__name__)

aggregator = ProgressAggregator()


def progress_snapshot(project: models.Project) -> dict:
    """Plain-dict copy of the zone/task tree, detached from the session."""
    return {
        "zones": [
            {"tasks": [{"status": task.status} for task in zone.tasks]}
            for zone in project.zones
        ]
    }


def apply_progress(project: models.Project) -> dict:
    """Write derived progress onto the project and its zones. Returns the computed figures."""
    result = aggregator.calculate(progress_snapshot(project))
    for zone, pct in zip(project.zones, result["zones"]):
        zone.progress = pct
    project.overall_progress = result["overall_progress"]
    return result


def save_project(db: Session, project: models.Project) -> models.Project:
    """Recompute progress, then commit and refresh the project."""
    if project.id is None:
        db.add(project)
    db.flush()
    result = apply_progress(project)
    db.commit()
    db.refresh(project)
    logger.info(
        "Project %s saved, overall progress %s%% across %d zones",
        project.id, result["overall_progress"], len(result["zones"]),
    )
    return project
