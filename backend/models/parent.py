"""Parent profile and parent-student link model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from backend.database import Base


class Parent(Base):
    """Role profile of a PARENT user."""
    __tablename__ = "parents"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="parent")
    student_links = relationship(
        "ParentStudentLink",
        back_populates="parent",
        cascade="all, delete-orphan",
        order_by="ParentStudentLink.id",
    )
    notes = relationship("ParentNote", back_populates="parent")


class ParentStudentLink(Base):
    """Edge of the parent-student graph. Links are permanent once created."""
    __tablename__ = "parent_student_links"

    id = Column(Integer, primary_key=True, index=True)
    parent_id = Column(Integer, ForeignKey("parents.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("parent_id", "student_id", name="uq_parent_student_link"),
    )

    parent = relationship("Parent", back_populates="student_links")
    student = relationship("Student", back_populates="parent_links")
