"""
Estimate endpoints.

Costing is always the full output of compute_cost_breakdown() over the
estimate's current project_details. It is computed on create and replaced
whole whenever project_details changes; it is never patched field by field.
"""

import logging
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..calculators.base import CalculatorInputError
from ..calculators.cost_estimator import compute_cost_breakdown, room_breakdown
from ..config import settings
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/estimates", tags=["estimates"])


def _compute_costing(project_details) -> dict:
    """Run the estimator, turning bad input into a 422."""
    try:
        return compute_cost_breakdown(project_details)
    except CalculatorInputError as e:
        logger.warning("Rejected project details: %s", e)
        raise HTTPException(status_code=422, detail=str(e))


def _get_lead_or_404(lead_id: int, db: Session) -> models.Lead:
    lead = db.query(models.Lead).filter(models.Lead.id == lead_id).first()
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead


def _get_estimate_or_404(estimate_id: int, db: Session) -> models.Estimate:
    estimate = db.query(models.Estimate).filter(models.Estimate.id == estimate_id).first()
    if not estimate:
        raise HTTPException(status_code=404, detail="Estimate not found")
    return estimate


# --- Endpoints ---
# Fixed paths first: /templates and /preview must not be captured by /{estimate_id}

@router.post("/preview")
def preview_costing(project_details: schemas.ProjectDetails):
    """Price project details without saving anything."""
    return {
        "project_details": project_details.model_dump(mode="json"),
        "costing": _compute_costing(project_details),
        "rooms": room_breakdown(project_details),
    }


@router.get("/templates")
def list_templates(db: Session = Depends(get_db)):
    templates = db.query(models.Estimate).filter(
        models.Estimate.is_template.is_(True)
    ).order_by(models.Estimate.created_at.desc()).all()
    return [_estimate_to_dict(t) for t in templates]


@router.post("/templates/{template_id}/apply/{lead_id}", status_code=201)
def create_from_template(
    template_id: int,
    lead_id: int,
    request: schemas.FromTemplateCreate,
    db: Session = Depends(get_db),
):
    """New estimate for a lead, seeded from a template's project details."""
    template = _get_estimate_or_404(template_id, db)
    if not template.is_template:
        raise HTTPException(status_code=400, detail="Estimate is not a template")
    _get_lead_or_404(lead_id, db)

    details = dict(template.project_details)
    estimate = models.Estimate(
        lead_id=lead_id,
        name=request.name or template.name,
        description=request.description if request.description is not None else template.description,
        project_details=details,
        costing=_compute_costing(details),
    )
    db.add(estimate)
    db.commit()
    db.refresh(estimate)
    logger.info("Estimate %s created for lead %s from template %s", estimate.id, lead_id, template_id)
    return _estimate_to_dict(estimate)


@router.post("/leads/{lead_id}", status_code=201)
def create_estimate(lead_id: int, request: schemas.EstimateCreate, db: Session = Depends(get_db)):
    _get_lead_or_404(lead_id, db)

    estimate = models.Estimate(
        lead_id=lead_id,
        name=request.name,
        description=request.description,
        project_details=request.project_details.model_dump(mode="json"),
        costing=_compute_costing(request.project_details),
    )
    db.add(estimate)
    db.commit()
    db.refresh(estimate)
    logger.info("Estimate %s created for lead %s, total %.2f",
                estimate.id, lead_id, estimate.costing["total"])
    return _estimate_to_dict(estimate)


@router.get("/leads/{lead_id}")
def list_lead_estimates(lead_id: int, db: Session = Depends(get_db)):
    estimates = db.query(models.Estimate).filter(
        models.Estimate.lead_id == lead_id
    ).order_by(models.Estimate.created_at.desc(), models.Estimate.id.desc()).all()
    return {
        "count": len(estimates),
        "estimates": [_estimate_to_dict(e) for e in estimates],
    }


@router.get("/{estimate_id}")
def get_estimate(estimate_id: int, db: Session = Depends(get_db)):
    estimate = _get_estimate_or_404(estimate_id, db)
    result = _estimate_to_dict(estimate)
    result["rooms"] = room_breakdown(estimate.project_details)
    return result


@router.put("/{estimate_id}")
def update_estimate(estimate_id: int, update: schemas.EstimateUpdate, db: Session = Depends(get_db)):
    """
    Partial update. New project_details trigger a full recompute of costing,
    replacing the previous breakdown.
    """
    estimate = _get_estimate_or_404(estimate_id, db)
    data = update.model_dump(exclude_unset=True)

    if update.project_details is not None:
        estimate.project_details = update.project_details.model_dump(mode="json")
        estimate.costing = _compute_costing(update.project_details)
        logger.info("Estimate %s repriced, total %.2f", estimate.id, estimate.costing["total"])
    data.pop("project_details", None)

    feedback = data.pop("client_feedback", None)
    if feedback is not None:
        estimate.client_feedback = {
            "content": feedback,
            "created_at": datetime.utcnow().isoformat(),
        }

    for field, value in data.items():
        setattr(estimate, field, value)

    db.commit()
    db.refresh(estimate)
    return _estimate_to_dict(estimate)


@router.post("/{estimate_id}/template", status_code=201)
def save_as_template(estimate_id: int, request: schemas.TemplateCreate, db: Session = Depends(get_db)):
    """Copy an estimate as a reusable template detached from its lead."""
    estimate = _get_estimate_or_404(estimate_id, db)

    template = models.Estimate(
        lead_id=None,
        name=request.template_name,
        description=estimate.description,
        project_details=dict(estimate.project_details),
        costing=_compute_costing(estimate.project_details),
        is_template=True,
        template_name=request.template_name,
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    logger.info("Estimate %s saved as template %s (%s)", estimate_id, template.id, request.template_name)
    return _estimate_to_dict(template)


def _estimate_to_dict(e: models.Estimate) -> dict:
    valid_until = None
    if e.created_at and not e.is_template:
        valid_until = (e.created_at + timedelta(days=settings.ESTIMATE_VALID_DAYS)).isoformat()
    return {
        "id": e.id,
        "lead_id": e.lead_id,
        "name": e.name,
        "description": e.description,
        "status": e.status.value if e.status else "draft",
        "project_details": e.project_details,
        "costing": e.costing,
        "is_template": bool(e.is_template),
        "template_name": e.template_name,
        "client_feedback": e.client_feedback,
        "valid_until": valid_until,
        "created_at": e.created_at.isoformat() if e.created_at else None,
        "updated_at": e.updated_at.isoformat() if e.updated_at else None,
        "lead": {
            "id": e.lead.id,
            "name": e.lead.name,
            "phone": e.lead.phone,
            "email": e.lead.email,
        } if e.lead else None,
    }
