"""University model definitions."""

from sqlalchemy import Column, Float, Integer, String, Text

from backend.database import Base


class University(Base):
    """Reference data that applications point at."""
    __tablename__ = "universities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    country = Column(String, nullable=False)
    state = Column(String)
    city = Column(String)
    us_news_ranking = Column(Integer)
    acceptance_rate = Column(Float)
    application_system = Column(String)
    tuition_in_state = Column(Integer)
    tuition_out_state = Column(Integer)
    application_fee = Column(Integer)
    deadlines = Column(Text)  # JSON text, e.g. {"early_action": "2024-11-01"}
