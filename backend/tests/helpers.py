"""Shared test doubles and builders."""
import io
import zipfile
from pathlib import Path

from themebot.schemas.theme import ApprovalState, MetadataColor, ThemeMetadata

API_SECRET = "test-secret-token"


def make_theme(file_id: str = "abc123", **overrides) -> ThemeMetadata:
    data = {
        "file_name": f"{file_id}.zip",
        "file_id": file_id,
        "theme_name": f"Theme {file_id}",
        "theme_author": "mocha",
        "theme_description": "Dark theme with soft accents",
        "message_id": None,
        "attachment_url": f"https://cdn.example.com/{file_id}.zip",
        "approval_state": ApprovalState.PENDING,
        "color": MetadataColor(hex="#1e1e2e", alpha=0.8),
        "icon": "https://cdn.example.com/icon.png",
        "thumbnails_urls": [
            "https://cdn.example.com/thumb-1.png",
            "https://cdn.example.com/thumb-2.png",
        ],
    }
    data.update(overrides)
    return ThemeMetadata(**data)


def zip_bytes(files: dict[str, bytes] | None = None) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in (files or {"theme.json": b"{}"}).items():
            archive.writestr(name, content)
    return buffer.getvalue()


class FakeChat:
    """Records message deletions instead of calling Discord."""

    def __init__(self, result: bool = True, error: Exception | None = None) -> None:
        self.deleted: list[str] = []
        self.result = result
        self.error = error

    async def delete_message(self, message_id: str) -> bool:
        self.deleted.append(message_id)
        if self.error is not None:
            raise self.error
        return self.result


class RecordingIngestor:
    """Stands in for ThemeIngestor; only remembers what was scheduled."""

    def __init__(self) -> None:
        self.calls: list[tuple[Path, str]] = []

    async def __call__(self, stored_path: Path, original_name: str) -> None:
        self.calls.append((stored_path, original_name))
