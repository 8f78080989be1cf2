from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from .models import (
    LeadSource, LeadStage, EstimateStatus, LayoutType, MaterialLevel, RoomType,
    ProjectStatus, ZoneName, TaskStatus, TaskCategory,
)


def _not_null(value):
    """Partial updates may omit a required field but never null it out."""
    if value is None:
        raise ValueError("may be omitted but not set to null")
    return value


# --- CRM ---

class Note(BaseModel):
    content: str
    created_at: Optional[datetime] = None

class NoteCreate(BaseModel):
    content: str = Field(..., min_length=1)

class LeadBase(BaseModel):
    name: str
    phone: str
    email: Optional[str] = None
    source: LeadSource
    project_tag: str
    follow_up_date: Optional[datetime] = None

class LeadCreate(LeadBase):
    pass

class LeadUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    stage: Optional[LeadStage] = None
    project_tag: Optional[str] = None
    follow_up_date: Optional[datetime] = None

    @field_validator("name", "phone", "project_tag", "stage")
    @classmethod
    def required_not_null(cls, value):
        return _not_null(value)

class Lead(LeadBase):
    id: int
    stage: LeadStage
    notes: List[Note] = []
    created_at: datetime
    class Config:
        from_attributes = True

class ClientBase(BaseModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    lead_id: Optional[int] = None

class ClientCreate(ClientBase):
    pass

class ClientUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    @field_validator("name")
    @classmethod
    def required_not_null(cls, value):
        return _not_null(value)

class Client(ClientBase):
    id: int
    notes: List[Note] = []
    created_at: datetime
    class Config:
        from_attributes = True


# --- Estimates ---

class RoomEntry(BaseModel):
    type: RoomType
    count: int = Field(1, gt=0)

class ProjectDetails(BaseModel):
    sqft: float = Field(..., gt=0, allow_inf_nan=False)
    layout_type: LayoutType
    material_level: MaterialLevel
    rooms: List[RoomEntry] = Field(..., min_length=1)

class EstimateCreate(BaseModel):
    name: str
    description: Optional[str] = None
    project_details: ProjectDetails

class EstimateUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[EstimateStatus] = None
    project_details: Optional[ProjectDetails] = None
    client_feedback: Optional[str] = None

    @field_validator("name", "status")
    @classmethod
    def required_not_null(cls, value):
        return _not_null(value)

class TemplateCreate(BaseModel):
    template_name: str

class FromTemplateCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


# --- Projects ---

class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    category: TaskCategory
    assigned_to: Optional[str] = None

class ZoneCreate(BaseModel):
    name: ZoneName
    description: Optional[str] = None
    tasks: List[TaskCreate] = []

class ProjectCreate(BaseModel):
    name: str
    client_id: int
    lead_id: int
    status: ProjectStatus = ProjectStatus.PLANNING
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    zones: List[ZoneCreate] = []

class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("name", "status")
    @classmethod
    def required_not_null(cls, value):
        return _not_null(value)

class ZoneTaskCreate(TaskCreate):
    zone_name: ZoneName

class TaskStatusUpdate(BaseModel):
    zone_name: ZoneName
    task_id: int
    status: TaskStatus

class Photo(BaseModel):
    url: str
    caption: Optional[str] = None

class ZoneLogCreate(BaseModel):
    zone_name: ZoneName
    notes: Optional[str] = None
    photos: List[Photo] = []
