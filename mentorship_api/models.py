# mentorship_api/models.py
import logging
from enum import Enum
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON, Boolean, ForeignKey, Sequence, Index, text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .database import Base

logger = logging.getLogger(__name__)

class MentorshipStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED" # Mentor or admin declines
    CANCELLED = "CANCELLED" # Mentee withdraws a PENDING request

class Role(str, Enum):
    MENTEE = "MENTEE"
    MENTOR = "MENTOR"
    ADMIN = "ADMIN"

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, Sequence('user_id_seq'), primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)
    # List of Role values; a user may hold several
    roles = Column(JSON, nullable=False, default=lambda: [Role.MENTEE.value])
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    requests_as_mentor = relationship(
        "MentorshipRequest", back_populates="mentor", foreign_keys="MentorshipRequest.mentor_id"
    )
    requests_as_mentee = relationship(
        "MentorshipRequest", back_populates="mentee", foreign_keys="MentorshipRequest.mentee_id"
    )

    @property
    def role_set(self) -> frozenset:
        known = {role.value for role in Role}
        unknown = [r for r in (self.roles or []) if r not in known]
        if unknown:
            logger.warning(f"Ignoring unknown roles {unknown} on user {self.id}")
        return frozenset(Role(r) for r in (self.roles or []) if r in known)

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', roles={self.roles})>"

class MentorshipRequest(Base):
    __tablename__ = "mentorship_requests"
    __table_args__ = (
        # At most one PENDING request per mentor-mentee pair
        Index(
            "uq_pending_request_per_pair",
            "mentor_id",
            "mentee_id",
            unique=True,
            postgresql_where=text("status = 'PENDING'"),
            sqlite_where=text("status = 'PENDING'"),
        ),
    )

    id = Column(Integer, Sequence('mentorship_request_id_seq'), primary_key=True, index=True)

    mentor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    mentee_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Written only through MentorshipService.update_status after authorization
    status = Column(String, default=MentorshipStatus.PENDING.value, nullable=False)
    reason = Column(Text, nullable=True) # Only set for REJECTED

    message = Column(Text, nullable=True)
    background = Column(Text, nullable=True)
    expectation = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    mentor = relationship("User", back_populates="requests_as_mentor", foreign_keys=[mentor_id])
    mentee = relationship("User", back_populates="requests_as_mentee", foreign_keys=[mentee_id])

    def __repr__(self):
        return f"<MentorshipRequest(id={self.id}, mentee_id={self.mentee_id}, mentor_id={self.mentor_id}, status='{self.status}')>"
