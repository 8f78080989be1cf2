"""
Project tracking endpoints: zones, tasks, site logs, progress.

Every mutation persists through project_store.save_project(), which
recomputes zone and overall progress before committing.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..config import settings
from ..database import get_db
from ..project_store import save_project

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


def _get_project_or_404(project_id: int, db: Session) -> models.Project:
    project = db.query(models.Project).filter(models.Project.id == project_id).first()
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


def _find_zone(project: models.Project, zone_name) -> models.Zone:
    """First zone with this name, 404 if none."""
    for zone in project.zones:
        if zone.name == zone_name:
            return zone
    raise HTTPException(status_code=404, detail="Zone not found")


def _new_task(task: schemas.TaskCreate) -> models.Task:
    return models.Task(
        title=task.title,
        description=task.description,
        due_date=task.due_date,
        status=task.status,
        category=task.category,
        assigned_to=task.assigned_to,
        completed_at=datetime.utcnow() if task.status == models.TaskStatus.DONE else None,
    )


# --- Endpoints ---

@router.post("/", status_code=201)
def create_project(request: schemas.ProjectCreate, db: Session = Depends(get_db)):
    client = db.query(models.Client).filter(models.Client.id == request.client_id).first()
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    lead = db.query(models.Lead).filter(models.Lead.id == request.lead_id).first()
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")

    project = models.Project(
        name=request.name,
        client_id=request.client_id,
        lead_id=request.lead_id,
        status=request.status,
        start_date=request.start_date,
        end_date=request.end_date,
    )
    for zone_data in request.zones:
        zone = models.Zone(name=zone_data.name, description=zone_data.description)
        zone.tasks = [_new_task(t) for t in zone_data.tasks]
        project.zones.append(zone)

    save_project(db, project)
    logger.info("Project %s created for client %s", project.id, project.client_id)
    return _project_to_dict(project)


@router.get("/{project_id}")
def get_project(project_id: int, db: Session = Depends(get_db)):
    return _project_to_dict(_get_project_or_404(project_id, db))


@router.patch("/{project_id}")
def update_project(project_id: int, update: schemas.ProjectUpdate, db: Session = Depends(get_db)):
    project = _get_project_or_404(project_id, db)
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(project, field, value)
    save_project(db, project)
    return _project_to_dict(project)


@router.post("/{project_id}/zones")
def add_zone(project_id: int, request: schemas.ZoneCreate, db: Session = Depends(get_db)):
    project = _get_project_or_404(project_id, db)
    zone = models.Zone(name=request.name, description=request.description)
    zone.tasks = [_new_task(t) for t in request.tasks]
    project.zones.append(zone)
    save_project(db, project)
    return _project_to_dict(project)


@router.post("/{project_id}/tasks")
def add_task(project_id: int, request: schemas.ZoneTaskCreate, db: Session = Depends(get_db)):
    project = _get_project_or_404(project_id, db)
    zone = _find_zone(project, request.zone_name)
    zone.tasks.append(_new_task(request))
    save_project(db, project)
    return _project_to_dict(project)


@router.put("/{project_id}/tasks/status")
def update_task_status(project_id: int, request: schemas.TaskStatusUpdate, db: Session = Depends(get_db)):
    project = _get_project_or_404(project_id, db)
    zone = _find_zone(project, request.zone_name)

    task = next((t for t in zone.tasks if t.id == request.task_id), None)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")

    task.status = request.status
    # completed_at records the latest completion. Reopening a task keeps it.
    if request.status == models.TaskStatus.DONE:
        task.completed_at = datetime.utcnow()

    save_project(db, project)
    logger.info("Task %s in project %s set to %s", task.id, project.id, request.status.value)
    return _project_to_dict(project)


@router.post("/{project_id}/logs")
def add_log(project_id: int, request: schemas.ZoneLogCreate, db: Session = Depends(get_db)):
    project = _get_project_or_404(project_id, db)
    zone = _find_zone(project, request.zone_name)

    now = datetime.utcnow()
    zone.logs.append(models.ZoneLog(
        notes=request.notes,
        photos=[
            {"url": p.url, "caption": p.caption, "uploaded_at": now.isoformat()}
            for p in request.photos
        ],
        created_at=now,
    ))
    project.last_client_update = {
        "timestamp": now.isoformat(),
        "content": f"New update in {request.zone_name.value}: {request.notes}",
    }
    save_project(db, project)
    return _project_to_dict(project)


@router.get("/{project_id}/recent-updates")
def get_recent_updates(project_id: int, db: Session = Depends(get_db)):
    """Latest site logs across all zones, newest first (client portal feed)."""
    project = _get_project_or_404(project_id, db)
    updates = [
        {
            "zone": zone.name.value,
            "content": log.notes,
            "photos": log.photos or [],
            "timestamp": log.created_at,
            "log_id": log.id,
        }
        for zone in project.zones
        for log in zone.logs
    ]
    updates.sort(key=lambda u: (u["timestamp"], u["log_id"]), reverse=True)
    return [
        {**u, "timestamp": u["timestamp"].isoformat()}
        for u in updates[:settings.RECENT_UPDATES_LIMIT]
    ]


@router.get("/{project_id}/progress")
def get_progress(project_id: int, db: Session = Depends(get_db)):
    project = _get_project_or_404(project_id, db)
    return {
        "project_id": project.id,
        "overall_progress": project.overall_progress,
        "zones": [
            {
                "id": zone.id,
                "name": zone.name.value,
                "progress": zone.progress,
                "task_count": len(zone.tasks),
                "tasks_done": sum(1 for t in zone.tasks if t.status == models.TaskStatus.DONE),
            }
            for zone in project.zones
        ],
    }


def _project_to_dict(p: models.Project) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "client_id": p.client_id,
        "lead_id": p.lead_id,
        "status": p.status.value if p.status else "planning",
        "start_date": p.start_date.isoformat() if p.start_date else None,
        "end_date": p.end_date.isoformat() if p.end_date else None,
        "overall_progress": p.overall_progress,
        "last_client_update": p.last_client_update,
        "created_at": p.created_at.isoformat() if p.created_at else None,
        "updated_at": p.updated_at.isoformat() if p.updated_at else None,
        "zones": [_zone_to_dict(z) for z in p.zones],
    }


def _zone_to_dict(z: models.Zone) -> dict:
    return {
        "id": z.id,
        "name": z.name.value,
        "description": z.description,
        "progress": z.progress,
        "tasks": [_task_to_dict(t) for t in z.tasks],
        "logs": [
            {
                "id": log.id,
                "notes": log.notes,
                "photos": log.photos or [],
                "created_at": log.created_at.isoformat() if log.created_at else None,
            }
            for log in z.logs
        ],
    }


def _task_to_dict(t: models.Task) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "description": t.description,
        "due_date": t.due_date.isoformat() if t.due_date else None,
        "status": t.status.value,
        "category": t.category.value,
        "assigned_to": t.assigned_to,
        "completed_at": t.completed_at.isoformat() if t.completed_at else None,
    }
