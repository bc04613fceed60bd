# career_canvas/models.py
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List

from sqlalchemy import (
    JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from .database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def unique_tags(values: Iterable[str]) -> List[str]:
    """Strips, drops empties and de-duplicates while keeping first-seen order."""
    seen = []
    for value in values or []:
        tag = str(value).strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def _merge_tags(entries, model, values: Iterable[str]) -> list:
    # Unchanged names keep their existing row so a resave never re-inserts a duplicate
    existing = {entry.name: entry for entry in entries}
    return [existing.get(name) or model(name=name) for name in unique_tags(values)]


class Availability(str, Enum):
    AVAILABLE = "available"
    LIMITED = "limited"
    BUSY = "busy"


class ConnectionStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    picture = Column(String, nullable=True)
    provider = Column(String, nullable=False)
    provider_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow, nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', provider='{self.provider}')>"


class MentorSkill(Base):
    __tablename__ = "mentor_skills"
    __table_args__ = (UniqueConstraint("mentor_id", "name", name="uq_mentor_skill"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    mentor_id = Column(String(36), ForeignKey("mentors.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False, index=True)


class MentorInterest(Base):
    __tablename__ = "mentor_interests"
    __table_args__ = (UniqueConstraint("mentor_id", "name", name="uq_mentor_interest"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    mentor_id = Column(String(36), ForeignKey("mentors.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)


class Mentor(Base):
    __tablename__ = "mentors"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=True, index=True)
    # Unique at the storage layer: one profile per email even under concurrent creates
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    department = Column(String, nullable=False, index=True)
    bio = Column(Text, nullable=False)
    experience = Column(Integer, nullable=False, default=0)
    availability = Column(String, nullable=False, default=Availability.AVAILABLE.value, index=True)
    rating = Column(Float, nullable=False, default=5.0, index=True)
    mentee_count = Column(Integer, nullable=False, default=0)
    mentorship_history = Column(JSONType, nullable=True)
    last_active = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    skill_entries = relationship(
        "MentorSkill", cascade="all, delete-orphan", lazy="selectin", order_by="MentorSkill.id"
    )
    interest_entries = relationship(
        "MentorInterest", cascade="all, delete-orphan", lazy="selectin", order_by="MentorInterest.id"
    )

    @property
    def skills(self) -> List[str]:
        return [entry.name for entry in self.skill_entries]

    @skills.setter
    def skills(self, values: Iterable[str]):
        self.skill_entries = _merge_tags(self.skill_entries, MentorSkill, values)

    @property
    def interests(self) -> List[str]:
        return [entry.name for entry in self.interest_entries]

    @interests.setter
    def interests(self, values: Iterable[str]):
        self.interest_entries = _merge_tags(self.interest_entries, MentorInterest, values)

    def __repr__(self):
        return f"<Mentor(id={self.id}, name='{self.name}', department='{self.department}')>"


class MentorshipPreferences(Base):
    __tablename__ = "mentorship_preferences"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), unique=True, index=True, nullable=False)
    mentorship_type = Column(String, nullable=False)
    interests = Column(JSONType, nullable=False, default=list)
    preferred_departments = Column(JSONType, nullable=False, default=list)
    availability_type = Column(String, nullable=False, default="flexible")
    session_frequency = Column(String, nullable=False, default="bi-weekly")
    communication_style = Column(String, nullable=False, default="mixed")
    goals = Column(Text, nullable=False, default="")
    experience = Column(String, nullable=False, default="")
    preferences = Column(JSONType, nullable=True)
    availability = Column(JSONType, nullable=True)
    bio = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<MentorshipPreferences(user_id={self.user_id}, type='{self.mentorship_type}')>"


class ConnectionRequest(Base):
    __tablename__ = "connection_requests"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)
    mentor_id = Column(String(36), ForeignKey("mentors.id", ondelete="CASCADE"), nullable=False, index=True)
    message = Column(Text, nullable=False, default="Connection request")
    status = Column(String, nullable=False, default=ConnectionStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    mentor = relationship("Mentor", viewonly=True)

    def __repr__(self):
        return f"<ConnectionRequest(id={self.id}, user_id={self.user_id}, mentor_id={self.mentor_id}, status='{self.status}')>"


class Story(Base):
    __tablename__ = "stories"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, default="anonymous", index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)
    tags = Column(JSONType, nullable=False, default=list)
    is_public = Column(Boolean, nullable=False, default=True)
    media_urls = Column(JSONType, nullable=False, default=list)
    career_level = Column(String, nullable=False, default="mid")
    industry = Column(String, nullable=False, default="technology")
    likes = Column(Integer, nullable=False, default=0)
    views = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Story(id={self.id}, title='{self.title[:20]}...', category='{self.category}')>"
