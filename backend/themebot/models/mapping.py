"""
Mapping between `ThemeMetadata` (nested color, list of thumbnails) and the flat
`themes` row.

Thumbnails are joined with THUMBNAIL_DELIMITER, so a URL that itself contains a
comma does not survive the round trip. The on-disk format is kept as is for
compatibility with existing databases, which is also why the timestamp
columns keep their `createdAt`/`updatedAt` names and a NULL approval_state
reads back as pending.
"""
from typing import Any

from themebot.models.theme import ThemeRow
from themebot.schemas.theme import ApprovalState, MetadataColor, ThemeMetadata, ThemeUpdate

THUMBNAIL_DELIMITER = ","


def join_thumbnails(urls: list[str] | None) -> str | None:
    """None stays NULL; an empty list is stored as the empty string."""
    if urls is None:
        return None
    return THUMBNAIL_DELIMITER.join(urls)


def split_thumbnails(value: str | None) -> list[str] | None:
    """Inverse of join_thumbnails. The empty string gives [], never [""]."""
    if value is None:
        return None
    if value == "":
        return []
    return value.split(THUMBNAIL_DELIMITER)


def to_row(metadata: ThemeMetadata) -> dict[str, Any]:
    """Column values for `metadata`, ready for insert()/update().values()."""
    return {
        "file_name": metadata.file_name,
        "file_id": metadata.file_id,
        "theme_name": metadata.theme_name,
        "theme_author": metadata.theme_author,
        "theme_description": metadata.theme_description,
        "message_id": metadata.message_id,
        "attachment_url": metadata.attachment_url,
        "approval_state": ApprovalState(metadata.approval_state).value,
        "color": metadata.color.hex,
        "alpha": metadata.color.alpha,
        "icon": metadata.icon,
        "thumbnail_urls": join_thumbnails(metadata.thumbnails_urls),
    }


def from_row(row: ThemeRow | None) -> ThemeMetadata | None:
    if row is None:
        return None
    return ThemeMetadata(
        file_name=row.file_name,
        file_id=row.file_id,
        theme_name=row.theme_name,
        theme_author=row.theme_author,
        theme_description=row.theme_description,
        message_id=row.message_id,
        attachment_url=row.attachment_url,
        approval_state=ApprovalState(row.approval_state or ApprovalState.PENDING.value),
        color=MetadataColor(hex=row.color, alpha=row.alpha or 0.0),
        icon=row.icon,
        thumbnails_urls=split_thumbnails(row.thumbnail_urls),
    )


def update_to_columns(update: ThemeUpdate) -> dict[str, Any]:
    """Flatten only the fields the client actually sent."""
    sent = update.model_dump(exclude_unset=True, mode="json")
    columns: dict[str, Any] = {}
    for name, value in sent.items():
        if name == "color":
            if value is None:
                columns["color"] = None
                columns["alpha"] = 0.0
            else:
                color = update.color
                if "hex" in color.model_fields_set:
                    columns["color"] = color.hex
                if "alpha" in color.model_fields_set:
                    columns["alpha"] = color.alpha
        elif name == "thumbnails_urls":
            columns["thumbnail_urls"] = join_thumbnails(value)
        else:
            columns[name] = value
    return columns
