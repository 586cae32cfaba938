"""
Persistence gateway for theme records.

Every operation opens its own session and issues a single statement, so there is
no multi-step transaction to coordinate. SQLAlchemy failures are logged with
their traceback and re-raised as the typed errors from `themebot.services.errors`.
"""
import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Protocol

from sqlalchemy import delete, inspect, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from themebot.models.mapping import from_row, to_row
from themebot.models.theme import ThemeRow
from themebot.schemas.theme import ApprovalState, ThemeMetadata
from themebot.services.errors import (
    ThemeConflictError,
    ThemeStoreError,
    ThemeValidationError,
)

LOG = logging.getLogger(__name__)
THEMES = "[THEMES]"

# Columns a partial update may touch. file_id is the key and id is internal.
UPDATABLE_COLUMNS = frozenset(
    attr.key
    for attr in inspect(ThemeRow).column_attrs
    if attr.key not in ("id", "file_id", "created_at", "updated_at")
)


class ChatPlatform(Protocol):
    """Chat client able to remove the message that announced a theme."""

    async def delete_message(self, message_id: str) -> bool: ...


def _integrity_error(exc: IntegrityError) -> ThemeValidationError:
    detail = str(exc.orig) if exc.orig is not None else str(exc)
    if "unique" in detail.lower() or "duplicate" in detail.lower():
        return ThemeConflictError(detail)
    return ThemeValidationError(detail)


class ThemeGateway:
    """CRUD over the `themes` table keyed by file_id."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        chat: ChatPlatform | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._chat = chat
        self._pending: set[asyncio.Task] = set()

    async def upsert_by_file_id(self, metadata: ThemeMetadata) -> str | None:
        """
        Overwrite every mutable column of an existing theme and return the
        message_id the record had before the update. Returns None and writes
        nothing when no theme has this file_id; new records go through `create`.
        """
        values = to_row(metadata)
        values.pop("file_id")
        async with self._session_factory() as session:
            try:
                result = await session.execute(
                    select(ThemeRow.message_id).where(ThemeRow.file_id == metadata.file_id)
                )
                existing = result.one_or_none()
                if existing is None:
                    LOG.info("%s upsert skipped, unknown file_id=%s", THEMES, metadata.file_id)
                    return None
                await session.execute(
                    update(ThemeRow).where(ThemeRow.file_id == metadata.file_id).values(**values)
                )
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                LOG.exception("%s upsert rejected file_id=%s", THEMES, metadata.file_id)
                raise _integrity_error(e) from e
            except SQLAlchemyError as e:
                await session.rollback()
                LOG.exception("%s upsert failed file_id=%s", THEMES, metadata.file_id)
                raise ThemeStoreError(f"upsert failed for {metadata.file_id}") from e
        return existing.message_id

    async def create(self, metadata: ThemeMetadata) -> bool:
        """Insert a new theme. Raises ThemeConflictError on a duplicate file_id or message_id."""
        async with self._session_factory() as session:
            session.add(ThemeRow(**to_row(metadata)))
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                LOG.exception("%s create rejected file_id=%s", THEMES, metadata.file_id)
                raise _integrity_error(e) from e
            except SQLAlchemyError as e:
                await session.rollback()
                LOG.exception("%s create failed file_id=%s", THEMES, metadata.file_id)
                raise ThemeStoreError(f"create failed for {metadata.file_id}") from e
        LOG.info("%s created file_id=%s", THEMES, metadata.file_id)
        return True

    async def list_themes(
        self,
        limit: int,
        offset: int = 0,
        status: ApprovalState | None = None,
    ) -> list[ThemeMetadata]:
        """Page through themes in insertion order, optionally filtered by approval state."""
        query = select(ThemeRow).order_by(ThemeRow.id).limit(limit).offset(offset)
        if status is not None:
            query = query.where(ThemeRow.approval_state == ApprovalState(status).value)
        async with self._session_factory() as session:
            try:
                result = await session.execute(query)
                rows = result.scalars().all()
            except SQLAlchemyError as e:
                LOG.exception("%s list failed limit=%s offset=%s status=%s", THEMES, limit, offset, status)
                raise ThemeStoreError("list failed") from e
        return [from_row(row) for row in rows]

    async def get_by_file_id(self, file_id: str) -> ThemeMetadata | None:
        return await self._get_one(ThemeRow.file_id == file_id, f"file_id={file_id}")

    async def get_by_message_id(self, message_id: str) -> ThemeMetadata | None:
        return await self._get_one(ThemeRow.message_id == message_id, f"message_id={message_id}")

    async def get_status(self, file_id: str) -> ApprovalState | None:
        theme = await self.get_by_file_id(file_id)
        return theme.approval_state if theme else None

    async def delete_by_file_id(self, file_id: str, message_id: str | None = None) -> bool:
        """
        Delete a theme. Returns False when no row matched. When `message_id` is
        given and the store call succeeded, the chat message is deleted in the
        background even if the row was already gone; that outcome is only logged.
        """
        async with self._session_factory() as session:
            try:
                result = await session.execute(delete(ThemeRow).where(ThemeRow.file_id == file_id))
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                LOG.exception("%s delete failed file_id=%s", THEMES, file_id)
                raise ThemeStoreError(f"delete failed for {file_id}") from e
        deleted = result.rowcount > 0
        LOG.info("%s delete file_id=%s deleted=%s", THEMES, file_id, deleted)
        if message_id:
            self._schedule_message_delete(message_id)
        return deleted

    async def update_by_file_id(self, file_id: str, fields: Mapping[str, Any]) -> bool:
        """
        Apply a partial column update. Returns False when no row matched.
        Unknown or read-only columns raise ThemeValidationError before any write.
        """
        unknown = set(fields) - UPDATABLE_COLUMNS
        if unknown:
            raise ThemeValidationError(f"cannot update columns: {', '.join(sorted(unknown))}")
        if not fields:
            return await self.get_by_file_id(file_id) is not None

        async with self._session_factory() as session:
            try:
                result = await session.execute(
                    update(ThemeRow).where(ThemeRow.file_id == file_id).values(**fields)
                )
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                LOG.exception("%s update rejected file_id=%s", THEMES, file_id)
                raise _integrity_error(e) from e
            except SQLAlchemyError as e:
                await session.rollback()
                LOG.exception("%s update failed file_id=%s", THEMES, file_id)
                raise ThemeStoreError(f"update failed for {file_id}") from e
        return result.rowcount > 0

    async def aclose(self) -> None:
        """Wait for background chat deletions still in flight."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    async def _get_one(self, condition, label: str) -> ThemeMetadata | None:
        async with self._session_factory() as session:
            try:
                result = await session.execute(select(ThemeRow).where(condition))
                row = result.scalar_one_or_none()
            except SQLAlchemyError as e:
                LOG.exception("%s lookup failed %s", THEMES, label)
                raise ThemeStoreError(f"lookup failed for {label}") from e
        return from_row(row)

    def _schedule_message_delete(self, message_id: str) -> None:
        if self._chat is None:
            LOG.info("%s no chat client configured, message_id=%s left in place", THEMES, message_id)
            return
        task = asyncio.create_task(self._chat.delete_message(message_id))
        self._pending.add(task)
        task.add_done_callback(lambda t: self._on_message_deleted(t, message_id))

    def _on_message_deleted(self, task: asyncio.Task, message_id: str) -> None:
        self._pending.discard(task)
        if task.cancelled():
            LOG.warning("%s message delete cancelled message_id=%s", THEMES, message_id)
            return
        exc = task.exception()
        if exc is not None:
            LOG.error("%s message delete failed message_id=%s: %s", THEMES, message_id, exc)
        elif not task.result():
            LOG.warning("%s message not deleted message_id=%s", THEMES, message_id)
        else:
            LOG.info("%s message deleted message_id=%s", THEMES, message_id)
