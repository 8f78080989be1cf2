from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Enum, Boolean, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import enum


# --- Enums ---

class LeadSource(str, enum.Enum):
    WEBSITE = "website"
    REFERRAL = "referral"
    SOCIAL = "social"
    WALK_IN = "walk-in"
    OTHER = "other"


class LeadStage(str, enum.Enum):
    NEW = "new"
    CONTACTED = "contacted"
    VISITED = "visited"
    QUOTED = "quoted"
    CLOSED = "closed"


class EstimateStatus(str, enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    APPROVED = "approved"
    REJECTED = "rejected"


class LayoutType(str, enum.Enum):
    ONE_BHK = "1BHK"
    TWO_BHK = "2BHK"
    THREE_BHK = "3BHK"
    FOUR_BHK = "4BHK"
    VILLA = "Villa"
    COMMERCIAL = "Commercial"


class MaterialLevel(str, enum.Enum):
    BASIC = "Basic"
    STANDARD = "Standard"
    PREMIUM = "Premium"
    LUXURY = "Luxury"


class RoomType(str, enum.Enum):
    LIVING_ROOM = "Living Room"
    BEDROOM = "Bedroom"
    KITCHEN = "Kitchen"
    BATHROOM = "Bathroom"
    DINING_ROOM = "Dining Room"
    STUDY = "Study"
    BALCONY = "Balcony"
    OTHER = "Other"


class ProjectStatus(str, enum.Enum):
    PLANNING = "planning"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"


class ZoneName(str, enum.Enum):
    KITCHEN = "Kitchen"
    LIVING_ROOM = "Living Room"
    BEDROOM = "Bedroom"
    BATHROOM = "Bathroom"
    DINING_ROOM = "Dining Room"
    BALCONY = "Balcony"
    OTHER = "Other"


class TaskStatus(str, enum.Enum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    DELAYED = "Delayed"
    DONE = "Done"


class TaskCategory(str, enum.Enum):
    DESIGN = "design"
    SITE_MARKING = "site_marking"
    FURNITURE = "furniture"
    FINISHING = "finishing"


# --- CRM ---

class Lead(Base):
    __tablename__ = "leads"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=True)
    source = Column(Enum(LeadSource), nullable=False)
    project_tag = Column(String, nullable=False)
    stage = Column(Enum(LeadStage), default=LeadStage.NEW)
    follow_up_date = Column(DateTime, nullable=True)
    notes = Column(JSON, default=list)  # [{"content": str, "created_at": iso}]
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    estimates = relationship("Estimate", back_populates="lead")


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String)
    phone = Column(String)
    address = Column(Text)
    notes = Column(JSON, default=list)  # [{"content": str, "created_at": iso}]
    lead_id = Column(Integer, ForeignKey("leads.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    projects = relationship("Project", back_populates="client")


# --- Estimates ---

class Estimate(Base):
    """Cost estimate for a lead. Templates carry no lead."""
    __tablename__ = "estimates"

    id = Column(Integer, primary_key=True, index=True)
    lead_id = Column(Integer, ForeignKey("leads.id"), nullable=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(Enum(EstimateStatus), default=EstimateStatus.DRAFT)
    project_details = Column(JSON, nullable=False)  # ProjectDetails snapshot
    costing = Column(JSON, nullable=False)  # CostBreakdown, replaced whole on recompute
    is_template = Column(Boolean, default=False)
    template_name = Column(String, nullable=True)
    client_feedback = Column(JSON, nullable=True)  # {"content": str, "created_at": iso}
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    lead = relationship("Lead", back_populates="estimates")


# --- Projects ---

class Project(Base):
    """
    Project aggregate: zones -> tasks / logs.

    overall_progress and Zone.progress are derived. They are written only by
    project_store.save_project(), never set directly by a handler.
    """
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False)
    lead_id = Column(Integer, ForeignKey("leads.id"), nullable=False)
    status = Column(Enum(ProjectStatus), default=ProjectStatus.PLANNING)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    overall_progress = Column(Integer, default=0)
    last_client_update = Column(JSON, nullable=True)  # {"timestamp": iso, "content": str}
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    client = relationship("Client", back_populates="projects")
    lead = relationship("Lead")
    zones = relationship("Zone", back_populates="project", cascade="all, delete-orphan",
                         order_by="Zone.id")


class Zone(Base):
    __tablename__ = "zones"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    name = Column(Enum(ZoneName), nullable=False)
    description = Column(Text, nullable=True)
    progress = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)

    project = relationship("Project", back_populates="zones")
    tasks = relationship("Task", back_populates="zone", cascade="all, delete-orphan",
                         order_by="Task.id")
    logs = relationship("ZoneLog", back_populates="zone", cascade="all, delete-orphan",
                        order_by="ZoneLog.id")


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    zone_id = Column(Integer, ForeignKey("zones.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime, nullable=True)
    status = Column(Enum(TaskStatus), default=TaskStatus.NOT_STARTED, nullable=False)
    category = Column(Enum(TaskCategory), nullable=False)
    assigned_to = Column(String, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    zone = relationship("Zone", back_populates="tasks")


class ZoneLog(Base):
    """Site update posted against a zone, shown on the client portal."""
    __tablename__ = "zone_logs"

    id = Column(Integer, primary_key=True, index=True)
    zone_id = Column(Integer, ForeignKey("zones.id"), nullable=False)
    notes = Column(Text, nullable=True)
    photos = Column(JSON, default=list)  # [{"url", "caption", "uploaded_at"}]
    created_at = Column(DateTime, default=datetime.utcnow)

    zone = relationship("Zone", back_populates="logs")
