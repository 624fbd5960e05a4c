"""Student profile model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.database import Base


class Student(Base):
    """Role profile of a STUDENT user."""
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    name = Column(String, nullable=False)
    graduation_year = Column(Integer)
    gpa = Column(Float)
    sat_score = Column(Integer)
    act_score = Column(Integer)
    target_countries = Column(Text)  # JSON text
    intended_majors = Column(Text)  # JSON text
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="student")
    applications = relationship(
        "Application",
        back_populates="student",
        cascade="all, delete-orphan",
        order_by="Application.created_at.desc()",
    )
    documents = relationship("Document", back_populates="student", cascade="all, delete-orphan")
    parent_links = relationship("ParentStudentLink", back_populates="student", cascade="all, delete-orphan")
