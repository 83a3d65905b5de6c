from __future__ import annotations

from sqlalchemy import CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class ItineraryJob(Base):
  __tablename__ = "itineraries"
  __table_args__ = (
    CheckConstraint("status IN ('processing', 'completed', 'failed')", name="ck_itineraries_status"),
    CheckConstraint("duration_days BETWEEN 1 AND 30", name="ck_itineraries_duration_days"),
    Index("ix_itineraries_status", "status"),
  )

  id: Mapped[str] = mapped_column(String, primary_key=True)
  status: Mapped[str] = mapped_column(String, nullable=False)
  destination: Mapped[str] = mapped_column(String, nullable=False)
  duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
  created_at: Mapped[str] = mapped_column(String, nullable=False)
  completed_at: Mapped[str | None] = mapped_column(String, nullable=True)
  itinerary_json: Mapped[str | None] = mapped_column(Text, nullable=True)
  error: Mapped[str | None] = mapped_column(Text, nullable=True)
