"""Uploaded document model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from backend.database import Base
from backend.models.enums import DocumentType


class Document(Base):
    """Metadata and storage pointer for one uploaded file."""
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    filename = Column(String, nullable=False)
    original_name = Column(String, nullable=False)
    mime_type = Column(String, nullable=False)
    size = Column(Integer, nullable=False)
    path = Column(String, nullable=False)
    document_type = Column(Enum(DocumentType, native_enum=False, length=32), nullable=False, default=DocumentType.OTHER)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="SET NULL"))
    requirement_id = Column(Integer, ForeignKey("application_requirements.id", ondelete="SET NULL"))
    uploaded_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    student = relationship("Student", back_populates="documents")
    application = relationship("Application", back_populates="documents")
    requirement = relationship("ApplicationRequirement", back_populates="documents")
