from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Boolean, false
from caltrack.db import Base

class Exercise(Base):
    __tablename__ = "exercises"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    category: Mapped[str] = mapped_column(String(60), nullable=False, default="")
    subtype: Mapped[str] = mapped_column(String(60), nullable=False, default="")
    # False for the built-in catalog, True for anything the user created or imported
    is_custom: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=false())
