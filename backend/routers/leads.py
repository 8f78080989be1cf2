import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from .. import models, schemas
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leads", tags=["leads"])

def _get_lead_or_404(lead_id: int, db: Session) -> models.Lead:
    lead = db.query(models.Lead).filter(models.Lead.id == lead_id).first()
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead

@router.post("/", response_model=schemas.Lead, status_code=201)
def create_lead(lead: schemas.LeadCreate, db: Session = Depends(get_db)):
    db_lead = models.Lead(**lead.model_dump(), notes=[])
    db.add(db_lead)
    db.commit()
    db.refresh(db_lead)
    return db_lead

@router.get("/{lead_id}", response_model=schemas.Lead)
def get_lead(lead_id: int, db: Session = Depends(get_db)):
    return _get_lead_or_404(lead_id, db)

@router.patch("/{lead_id}", response_model=schemas.Lead)
def update_lead(lead_id: int, update: schemas.LeadUpdate, db: Session = Depends(get_db)):
    lead = _get_lead_or_404(lead_id, db)
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(lead, field, value)
    db.commit()
    db.refresh(lead)
    return lead

@router.post("/{lead_id}/notes", response_model=schemas.Lead, status_code=201)
def add_lead_note(lead_id: int, note: schemas.NoteCreate, db: Session = Depends(get_db)):
    lead = _get_lead_or_404(lead_id, db)
    # JSON column: assign a new list so the change is flushed
    lead.notes = list(lead.notes or []) + [
        {"content": note.content, "created_at": datetime.utcnow().isoformat()}
    ]
    db.commit()
    db.refresh(lead)
    logger.info("Note added to lead %s (%d total)", lead.id, len(lead.notes))
    return lead
