"""
Spacetime Backend: Memory Route Handlers
=========================================

What:  The /memories CRUD surface.
How:   Path ids are parsed as UUIDs and bodies as MemoryWrite by FastAPI
       (failures → 400 via the validation handler); every route requires a
       bearer token; MemoryService applies the ownership rules.

Routes:
    GET    /memories        caller's memories, oldest first, excerpted
    GET    /memories/{id}   one memory; 401 if private and not the caller's
    POST   /memories        create, owner = caller
    PUT    /memories/{id}   replace fields; 401 if not the caller's
    DELETE /memories/{id}   remove; 401 if not the caller's; 200 empty body
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes.dependencies import get_current_user_id
from app.schemas.common import ErrorResponse
from app.schemas.memory import MemoryResponse, MemoryWrite
from app.services.memory_service import memory_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/memories",
    tags=["Memories"],
    responses={
        400: {"description": "Invalid id or body", "model": ErrorResponse},
        401: {"description": "Missing/invalid token, or not the owner"},
    },
)


@router.get(
    "",
    response_model=List[MemoryResponse],
    summary="List the caller's memories",
    description=(
        "Returns every memory owned by the caller, oldest first. Content is cut "
        "to its first 120 characters followed by '...'."
    ),
)
async def list_memories(
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[MemoryResponse]:
    return await memory_service.list_memories(db=db, user_id=user_id)


@router.get(
    "/{memory_id}",
    response_model=MemoryResponse,
    responses={500: {"description": "Unknown memory id", "model": ErrorResponse}},
    summary="Get a single memory",
)
async def get_memory(
    memory_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MemoryResponse:
    """Public memories are readable by anyone signed in; private ones only by the owner."""
    return await memory_service.get_memory(db=db, memory_id=memory_id, user_id=user_id)


@router.post(
    "",
    response_model=MemoryResponse,
    summary="Create a memory",
)
async def create_memory(
    payload: MemoryWrite,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MemoryResponse:
    return await memory_service.create_memory(db=db, user_id=user_id, payload=payload)


@router.put(
    "/{memory_id}",
    response_model=MemoryResponse,
    responses={500: {"description": "Unknown memory id", "model": ErrorResponse}},
    summary="Replace a memory's content, cover and visibility",
)
async def update_memory(
    memory_id: UUID,
    payload: MemoryWrite,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MemoryResponse:
    return await memory_service.update_memory(
        db=db, memory_id=memory_id, user_id=user_id, payload=payload
    )


@router.delete(
    "/{memory_id}",
    status_code=200,
    response_class=Response,
    responses={
        200: {"description": "Deleted; empty body"},
        500: {"description": "Unknown memory id", "model": ErrorResponse},
    },
    summary="Delete a memory",
)
async def delete_memory(
    memory_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await memory_service.delete_memory(db=db, memory_id=memory_id, user_id=user_id)
    return Response(status_code=200)
