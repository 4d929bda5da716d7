"""Appointment model definitions."""

from uuid import uuid4

from sqlalchemy import Column, DateTime, String
from backend.database import Base


def generate_appointment_id() -> str:
    return uuid4().hex


class Appointment(Base):
    """Represents a booking between a student and a professional."""
    __tablename__ = "appointments"

    id = Column(String(32), primary_key=True, default=generate_appointment_id)
    specialty = Column(String, nullable=False)
    comments = Column(String, nullable=True)
    date = Column(DateTime, nullable=False)
    student = Column(String, nullable=False)
    professional = Column(String, nullable=False)
