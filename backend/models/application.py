"""Application and requirement model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from backend.database import Base
from backend.models.enums import (
    ApplicationStatus,
    ApplicationType,
    DecisionType,
    RequirementStatus,
    RequirementType,
)


class Application(Base):
    """One student's application to one university under one plan."""
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    university_id = Column(Integer, ForeignKey("universities.id"), nullable=False)
    application_type = Column(Enum(ApplicationType, native_enum=False, length=32), nullable=False)
    status = Column(
        Enum(ApplicationStatus, native_enum=False, length=32),
        nullable=False,
        default=ApplicationStatus.NOT_STARTED,
    )
    deadline = Column(DateTime)
    submitted_date = Column(DateTime)
    decision_date = Column(DateTime)
    decision_type = Column(Enum(DecisionType, native_enum=False, length=32))
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "student_id",
            "university_id",
            "application_type",
            name="uq_application_student_university_type",
        ),
    )

    student = relationship("Student", back_populates="applications")
    university = relationship("University")
    requirements = relationship(
        "ApplicationRequirement",
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="ApplicationRequirement.created_at",
    )
    parent_notes = relationship(
        "ParentNote",
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="ParentNote.created_at.desc()",
    )
    documents = relationship("Document", back_populates="application")


class ApplicationRequirement(Base):
    """Checklist item under an application."""
    __tablename__ = "application_requirements"

    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    requirement_type = Column(Enum(RequirementType, native_enum=False, length=32), nullable=False)
    status = Column(
        Enum(RequirementStatus, native_enum=False, length=32),
        nullable=False,
        default=RequirementStatus.NOT_STARTED,
    )
    deadline = Column(DateTime)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    application = relationship("Application", back_populates="requirements")
    documents = relationship("Document", back_populates="requirement")
