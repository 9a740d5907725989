"""The API module that contains the endpoints for chat sessions."""

from uuid import UUID

from fastapi import Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import schemas
from promptops.api import deps
from promptops.api.context import RequestContext
from promptops.api.router import TrailingSlashRouter
from promptops.core.chat_service import chat_service
from promptops.core.exceptions import NotFoundException

router = TrailingSlashRouter()


@router.post("/sessions", response_model=schemas.ChatSession)
async def create_chat_session(
    *,
    db: AsyncSession = Depends(deps.get_db),
    session_in: schemas.ChatSessionCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> schemas.ChatSession:
    """Create an empty chat session."""
    return await chat_service.create_session(db, session_in=session_in, ctx=ctx)


@router.get("/sessions/project/{project_id}", response_model=list[schemas.ChatSession])
async def read_project_chat_sessions(
    *, db: AsyncSession = Depends(deps.get_db), project_id: UUID
) -> list[schemas.ChatSession]:
    """List the chat sessions of a project."""
    return await chat_service.list_sessions_for_project(db, project_id=project_id)


@router.get("/sessions/user/{user_id}", response_model=list[schemas.ChatSession])
async def read_user_chat_sessions(
    *, db: AsyncSession = Depends(deps.get_db), user_id: UUID
) -> list[schemas.ChatSession]:
    """List the chat sessions of a user."""
    return await chat_service.list_sessions_for_user(db, user_id=user_id)


@router.get("/sessions/{session_id}", response_model=schemas.ChatSession)
async def read_chat_session(
    *, db: AsyncSession = Depends(deps.get_db), session_id: UUID
) -> schemas.ChatSession:
    """Get a chat session with its messages."""
    session = await chat_service.get_session(db, session_id=session_id)
    if not session:
        raise NotFoundException(f"Chat session with id {session_id} not found")
    return session


@router.put("/sessions/{session_id}", response_model=schemas.ChatSession)
async def update_chat_session(
    *,
    db: AsyncSession = Depends(deps.get_db),
    session_id: UUID,
    session_in: schemas.ChatSessionUpdate,
) -> schemas.ChatSession:
    """Replace the messages of a chat session."""
    return await chat_service.update_session(
        db, session_id=session_id, messages=session_in.messages
    )


@router.delete("/sessions/{session_id}", response_model=schemas.ChatSession)
async def delete_chat_session(
    *, db: AsyncSession = Depends(deps.get_db), session_id: UUID
) -> schemas.ChatSession:
    """Delete a chat session."""
    return await chat_service.delete_session(db, session_id=session_id)


@router.post("/sessions/{session_id}/messages")
async def send_chat_message(
    *,
    db: AsyncSession = Depends(deps.get_db),
    session_id: UUID,
    message_in: schemas.ChatMessageCreate,
    ctx: RequestContext = Depends(deps.get_context),
) -> StreamingResponse:
    """Post a message and stream the reply as server-sent events.

    Each frame is ``data: {"content": "<word> "}``; the stream ends with
    ``data: [DONE]``.

    Args:
    ----
        db (AsyncSession): The database session.
        session_id (UUID): The chat session.
        message_in (schemas.ChatMessageCreate): The message and the model to answer with.
        ctx (RequestContext): The request context.

    Returns:
    -------
        StreamingResponse: The ``text/event-stream`` response.

    """
    stream = await chat_service.send_message(
        db, session_id=session_id, message_in=message_in, ctx=ctx
    )
    return StreamingResponse(
        stream,
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
