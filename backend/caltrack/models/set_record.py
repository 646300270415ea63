from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, ForeignKey, Boolean, DateTime
from caltrack.db import Base

class SetRecord(Base):
    __tablename__ = "sets"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    workout_exercise_id: Mapped[int] = mapped_column(ForeignKey("workout_exercises.id"), index=True)
    # Not unique per workout exercise: every completion is logged
    set_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Set only while completed is true
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
