"""
SQLAlchemy model for the `themes` table.
`file_id` is the natural key used by every lookup; `message_id` ties a theme to
the Discord message that announced it.
"""
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base for all models."""

    pass


class ThemeRow(Base):
    """
    Flat storage shape of a theme: color is split into `color` (hex) and `alpha`,
    thumbnails are joined into one comma-delimited `thumbnail_urls` column.
    """

    __tablename__ = "themes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    theme_name: Mapped[str] = mapped_column(String(255), nullable=False)
    theme_author: Mapped[str | None] = mapped_column(String(255), nullable=True)
    theme_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    message_id: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)
    attachment_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # nullable in databases created by the previous bot; NULL reads back as pending
    approval_state: Mapped[str | None] = mapped_column(String(16), nullable=True, default="pending")
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)
    alpha: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    icon: Mapped[str | None] = mapped_column(Text, nullable=True)
    thumbnail_urls: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Column names match the existing `themes` tables (createdAt/updatedAt). Never read back.
    created_at: Mapped[datetime] = mapped_column(
        "createdAt",
        DateTime,
        default=_utcnow,
        nullable=False,
        deferred=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt",
        DateTime,
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
        deferred=True,
    )

    def __repr__(self) -> str:
        return f"<ThemeRow(file_id={self.file_id!r}, approval_state={self.approval_state!r})>"
