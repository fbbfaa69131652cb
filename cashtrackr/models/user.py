"""User ORM — identity record with the single-purpose opaque token.

Invariants:
    - email is unique
    - token is set only while awaiting confirmation or password reset
    - confirmed defaults to False

Design Decisions:
    - One nullable token column shared by confirmation and reset: a user is never
      in both flows at once
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cashtrackr.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(60), nullable=False)
    email: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String(60), nullable=False)
    token: Mapped[str | None] = mapped_column(String(6), nullable=True, index=True)
    confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    budgets: Mapped[list["Budget"]] = relationship(
        "Budget", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )
