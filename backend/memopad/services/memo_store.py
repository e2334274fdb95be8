"""
MemoPad Backend — Memo Store (Storage Adapter)
===============================================

What:  The only component that talks to the database. Exposes async
       list / get / insert / delete operations over the `memos` table.
Why:   Keeps SQL out of the route handlers and guarantees every piece of
       client input reaches SQLite as a bound parameter.
How:   Each operation builds a SQLAlchemy Core statement, compiles it against
       the engine's dialect (preparation), then runs it on the shared
       connection (execution). Failures in the two phases are reported as
       different exceptions.
Who:   Constructed once by the application lifespan; injected into routes.

Error Translation:
    SQLAlchemyError while building/compiling  → StatementPreparationError
    SQLAlchemyError while running             → StatementExecutionError
    Row absent                                → None (not an error)
"""

import logging
from typing import Callable, List, Optional

from sqlalchemy import delete, insert, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql.expression import Executable

from memopad.config import Settings
from memopad.database import Base, create_engine
from memopad.exceptions import StatementExecutionError, StatementPreparationError
from memopad.models.memo import Memo
from memopad.schemas.memo import MemoResponse

logger = logging.getLogger(__name__)


class MemoStore:
    """
    Storage adapter owning the process-wide database engine.

    Responsibilities:
        - list_all():   every memo, ordered by id
        - get_by_id():  one memo or None
        - insert():     new memo in its own committed transaction
        - delete():     remove one memo, returning it, or None

    Concurrency:
        The engine holds a single pooled connection. Concurrent requests
        queue at checkout, so no two statements share the handle at once.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine

    @classmethod
    def from_settings(cls, settings: Settings) -> "MemoStore":
        return cls(create_engine(settings))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def create_schema(self) -> None:
        """Create the memos table if it does not exist yet. Safe to run repeatedly."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            raise self._execution_error("create_schema", e)
        logger.info("Schema ready: table '%s'", Memo.__tablename__)

    async def ping(self) -> bool:
        """Run SELECT 1 on the shared connection; False if the database is unreachable."""
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def close(self) -> None:
        """Dispose the engine, closing the pooled connection."""
        await self._engine.dispose()

    # ── Queries ───────────────────────────────────────────────────────────

    async def list_all(self) -> List[MemoResponse]:
        """
        Return every stored memo in creation order.

        An empty table yields an empty list.
        """
        statement = self._prepare(
            "list_all",
            lambda: select(Memo.id, Memo.text).order_by(Memo.id),
        )
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(statement)
                rows = result.all()
        except SQLAlchemyError as e:
            raise self._execution_error("list_all", e)

        return [MemoResponse(id=row.id, text=row.text) for row in rows]

    async def get_by_id(self, memo_id: int) -> Optional[MemoResponse]:
        """
        Fetch one memo by id.

        Returns:
            The memo, or None when no row has that id.
        """
        statement = self._prepare(
            "get_by_id",
            lambda: select(Memo.id, Memo.text).where(Memo.id == memo_id),
        )
        try:
            async with self._engine.connect() as conn:
                result = await conn.execute(statement)
                row = result.first()
        except SQLAlchemyError as e:
            raise self._execution_error("get_by_id", e, memo_id=memo_id)

        if row is None:
            logger.debug("Memo %s not found", memo_id)
            return None
        return MemoResponse(id=row.id, text=row.text)

    # ── Mutations ─────────────────────────────────────────────────────────

    async def insert(self, memo_text: str) -> MemoResponse:
        """
        Persist a new memo.

        Returns only after the transaction has committed, with the id
        SQLite assigned.

        Raises:
            StatementPreparationError: INSERT could not be built
            StatementExecutionError: INSERT or COMMIT failed
        """
        statement = self._prepare(
            "insert",
            lambda: insert(Memo).values(text=memo_text),
        )
        try:
            async with self._engine.begin() as conn:
                result = await conn.execute(statement)
                memo_id = result.inserted_primary_key[0]
        except SQLAlchemyError as e:
            raise self._execution_error("insert", e)

        logger.info("Memo %d created (%d chars)", memo_id, len(memo_text))
        return MemoResponse(id=memo_id, text=memo_text)

    async def delete(self, memo_id: int) -> Optional[MemoResponse]:
        """
        Remove a memo.

        Returns:
            The removed memo, or None when no row had that id.
        """
        lookup = self._prepare(
            "delete",
            lambda: select(Memo.id, Memo.text).where(Memo.id == memo_id),
        )
        removal = self._prepare(
            "delete",
            lambda: delete(Memo).where(Memo.id == memo_id),
        )
        try:
            async with self._engine.begin() as conn:
                row = (await conn.execute(lookup)).first()
                if row is None:
                    return None
                await conn.execute(removal)
        except SQLAlchemyError as e:
            raise self._execution_error("delete", e, memo_id=memo_id)

        logger.info("Memo %d deleted", memo_id)
        return MemoResponse(id=row.id, text=row.text)

    # ── Internals ─────────────────────────────────────────────────────────

    def _prepare(self, operation: str, build: Callable[[], Executable]) -> Executable:
        """
        Build a statement and compile it for this engine's dialect.

        Compiling up front surfaces malformed statements before a connection
        is checked out.
        """
        try:
            statement = build()
            statement.compile(dialect=self._engine.dialect)
        except SQLAlchemyError as e:
            logger.error("Statement preparation failed in %s: %s", operation, str(e))
            raise StatementPreparationError(
                message="A database error occurred. Please try again later.",
                context={"operation": operation, "error_type": type(e).__name__},
            ) from e
        return statement

    def _execution_error(
        self, operation: str, error: SQLAlchemyError, **context
    ) -> StatementExecutionError:
        logger.error(
            "Statement execution failed in %s: %s", operation, str(error), exc_info=True
        )
        exc = StatementExecutionError(
            message="A database error occurred. Please try again later.",
            context={"operation": operation, "error_type": type(error).__name__, **context},
        )
        exc.__cause__ = error
        return exc
