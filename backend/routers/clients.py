import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from .. import models, schemas
from ..database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["clients"])

def _get_client_or_404(client_id: int, db: Session) -> models.Client:
    client = db.query(models.Client).filter(models.Client.id == client_id).first()
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return client

@router.post("/", response_model=schemas.Client, status_code=201)
def create_client(client: schemas.ClientCreate, db: Session = Depends(get_db)):
    if client.lead_id is not None:
        lead = db.query(models.Lead).filter(models.Lead.id == client.lead_id).first()
        if not lead:
            raise HTTPException(status_code=404, detail="Lead not found")
    db_client = models.Client(**client.model_dump(), notes=[])
    db.add(db_client)
    db.commit()
    db.refresh(db_client)
    return db_client

@router.get("/{client_id}", response_model=schemas.Client)
def get_client(client_id: int, db: Session = Depends(get_db)):
    return _get_client_or_404(client_id, db)

@router.patch("/{client_id}", response_model=schemas.Client)
def update_client(client_id: int, update: schemas.ClientUpdate, db: Session = Depends(get_db)):
    client = _get_client_or_404(client_id, db)
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(client, field, value)
    db.commit()
    db.refresh(client)
    return client

@router.post("/{client_id}/notes", response_model=schemas.Client, status_code=201)
def add_client_note(client_id: int, note: schemas.NoteCreate, db: Session = Depends(get_db)):
    client = _get_client_or_404(client_id, db)
    client.notes = list(client.notes or []) + [
        {"content": note.content, "created_at": datetime.utcnow().isoformat()}
    ]
    db.commit()
    db.refresh(client)
    logger.info("Note added to client %s (%d total)", client.id, len(client.notes))
    return client
