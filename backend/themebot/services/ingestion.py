"""
Ingestion of uploaded theme archives.
Runs in background (fire-and-forget) after the upload response; every outcome is
written to the log and nothing is raised back to the caller.
"""
import logging
import zipfile
from pathlib import Path

from themebot.schemas.theme import ApprovalState, ThemeMetadata
from themebot.services.errors import ThemeGatewayError
from themebot.services.gateway import ThemeGateway

LOG = logging.getLogger(__name__)
INGEST = "[INGEST]"


class ThemeIngestor:
    """Turns a stored upload into a pending theme record."""

    def __init__(self, gateway: ThemeGateway) -> None:
        self._gateway = gateway

    async def ingest(self, stored_path: Path, original_name: str) -> ThemeMetadata | None:
        """
        Register `stored_path` as a pending theme. The stored file stem becomes
        the file_id. Returns the created record, or None if ingestion failed.
        """
        LOG.info("%s START file=%s original=%s", INGEST, stored_path.name, original_name)
        if not zipfile.is_zipfile(stored_path):
            LOG.warning("%s rejected, not a zip archive file=%s", INGEST, stored_path.name)
            return None

        metadata = ThemeMetadata(
            file_name=original_name,
            file_id=stored_path.stem,
            theme_name=Path(original_name).stem or stored_path.stem,
            approval_state=ApprovalState.PENDING,
        )
        try:
            await self._gateway.create(metadata)
        except ThemeGatewayError as e:
            LOG.error("%s FAILED file_id=%s: %s", INGEST, metadata.file_id, e)
            return None
        LOG.info("%s DONE file_id=%s", INGEST, metadata.file_id)
        return metadata

    async def __call__(self, stored_path: Path, original_name: str) -> None:
        await self.ingest(stored_path, original_name)
