"""
MemoPad Backend — Memo Route Handlers
======================================

What:  Handles the /memo endpoints: list, create, view-for-edit,
       view-for-delete and delete.
Why:   The HTTP surface of the memo resource.
How:   Extracts path/body data, calls the injected MemoStore, shapes JSON.
       Handlers never catch errors; storage failures and NotFoundError
       propagate to the exception handlers registered in main.py.

Endpoints:
    GET    /memo/               list every memo inside the title envelope
    POST   /memo/submit/        create a memo, echo the received body
    GET    /memo/edit/{id}      one memo (read only)
    GET    /memo/delete/{id}    one memo (read only, confirmation view)
    DELETE /memo/delete/{id}    remove the memo and return it
"""

import logging
import re

from fastapi import APIRouter, Depends, Response

from memopad.database import get_memo_store
from memopad.exceptions import NotFoundError
from memopad.schemas.memo import (
    ErrorResponse,
    MemoCreate,
    MemoListData,
    MemoListResponse,
    MemoResponse,
)
from memopad.services.memo_store import MemoStore

logger = logging.getLogger(__name__)

LIST_TITLE = "To-Do Memo List"

# Plain ASCII decimal with an optional leading "-".
# Bounds are SQLite's signed 64-bit INTEGER.
MEMO_ID_PATTERN = re.compile(r"-?[0-9]+")
SQLITE_INTEGER_MIN = -(2**63)
SQLITE_INTEGER_MAX = 2**63 - 1

router = APIRouter(prefix="/memo", tags=["Memos"])


def parse_memo_id(memo_id: str) -> int:
    """
    Convert the raw path segment into a storage id.

    A segment that is not a canonical integer, or lies outside the range
    SQLite can store, can never match a stored id. It is reported as not
    found rather than as a validation error.
    """
    if MEMO_ID_PATTERN.fullmatch(memo_id) is None:
        raise NotFoundError(resource="memo", resource_id=memo_id)
    value = int(memo_id)
    if not SQLITE_INTEGER_MIN <= value <= SQLITE_INTEGER_MAX:
        raise NotFoundError(resource="memo", resource_id=memo_id)
    return value


async def read_memo(store: MemoStore, memo_id: str) -> MemoResponse:
    memo = await store.get_by_id(parse_memo_id(memo_id))
    if memo is None:
        raise NotFoundError(resource="memo", resource_id=memo_id)
    return memo


@router.get(
    "/",
    response_model=MemoListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all memos",
)
async def list_memos(store: MemoStore = Depends(get_memo_store)) -> MemoListResponse:
    """Every stored memo, oldest first, wrapped with the list title. Empty is still 200."""
    memos = await store.list_all()
    return MemoListResponse(data=MemoListData(title=LIST_TITLE, content=memos))


@router.post(
    "/submit/",
    responses={
        200: {"description": "The request body, echoed"},
        400: {"description": "Missing or non-string text", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a memo",
    description=(
        "Stores a new memo from the `text` field and echoes the received body. "
        "The assigned id is returned in the Location header."
    ),
)
async def create_memo(
    payload: MemoCreate,
    response: Response,
    store: MemoStore = Depends(get_memo_store),
) -> dict:
    """
    Create a memo.

    The body is echoed unchanged (existing clients rely on it), so the new
    id travels in the Location header instead.
    """
    memo = await store.insert(payload.text)
    response.headers["Location"] = f"/memo/edit/{memo.id}"
    return payload.model_dump()


@router.get(
    "/edit/{memo_id}",
    response_model=MemoResponse,
    responses={404: {"description": "Memo not found", "model": ErrorResponse}},
    summary="Get a memo for editing",
)
async def get_memo_for_edit(
    memo_id: str, store: MemoStore = Depends(get_memo_store)
) -> MemoResponse:
    return await read_memo(store, memo_id)


@router.get(
    "/delete/{memo_id}",
    response_model=MemoResponse,
    responses={404: {"description": "Memo not found", "model": ErrorResponse}},
    summary="Get a memo for delete confirmation",
    description="Read only. Use DELETE on the same path to remove the memo.",
)
async def get_memo_for_delete(
    memo_id: str, store: MemoStore = Depends(get_memo_store)
) -> MemoResponse:
    return await read_memo(store, memo_id)


@router.delete(
    "/delete/{memo_id}",
    response_model=MemoResponse,
    responses={404: {"description": "Memo not found", "model": ErrorResponse}},
    summary="Delete a memo",
)
async def delete_memo(
    memo_id: str, store: MemoStore = Depends(get_memo_store)
) -> MemoResponse:
    """Remove the memo and return what was removed. Its id is never reused."""
    memo = await store.delete(parse_memo_id(memo_id))
    if memo is None:
        raise NotFoundError(resource="memo", resource_id=memo_id)
    return memo
