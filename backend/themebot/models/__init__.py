"""SQLAlchemy models and row <-> metadata mapping."""

from themebot.models.theme import Base, ThemeRow

__all__ = ["Base", "ThemeRow"]
