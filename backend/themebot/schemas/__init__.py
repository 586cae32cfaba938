"""Pydantic request/response models."""

from themebot.schemas.theme import ApprovalState, MetadataColor, ThemeMetadata, ThemeUpdate

__all__ = ["ApprovalState", "MetadataColor", "ThemeMetadata", "ThemeUpdate"]
