from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, ForeignKey, String, Text
from caltrack.db import Base

class Progression(Base):
    __tablename__ = "progressions"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id"), index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    goal: Mapped[str] = mapped_column(String(60), nullable=False, default="")
    difficulty: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Doubly-linked chain per exercise; maintained by ProgressionRepository
    prev_progression_id: Mapped[int | None] = mapped_column(ForeignKey("progressions.id"), nullable=True)
    next_progression_id: Mapped[int | None] = mapped_column(ForeignKey("progressions.id"), nullable=True)
