"""Chat service: sessions and streamed replies."""

import asyncio
import json
from typing import AsyncGenerator, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api.context import RequestContext
from promptops.core.config import settings
from promptops.core.datetime_utils import utc_now
from promptops.core.exceptions import NotFoundException
from promptops.integrations import model_provider
from promptops.models import ChatSession

DONE_EVENT = "data: [DONE]\n\n"


def format_chunk(text: str) -> str:
    """Frame a piece of the reply as a server-sent event."""
    return f"data: {json.dumps({'content': text})}\n\n"


def _message(role: str, content: str) -> dict:
    return {"role": role, "content": content, "timestamp": utc_now().isoformat()}


class ChatService:
    """Service for chat sessions."""

    async def create_session(
        self, db: AsyncSession, *, session_in: schemas.ChatSessionCreate, ctx: RequestContext
    ) -> ChatSession:
        """Create an empty chat session for a user in a project."""
        if not await crud.project.get(db, id=session_in.project_id):
            raise NotFoundException(f"Project with id {session_in.project_id} not found")
        if not await crud.user.get(db, id=session_in.user_id):
            raise NotFoundException(f"User with id {session_in.user_id} not found")

        session = await crud.chat_session.create(
            db, obj_in={**session_in.model_dump(), "messages": []}
        )
        ctx.logger.with_context(chat_session_id=str(session.id)).info("Created chat session")
        return session

    async def get_session(self, db: AsyncSession, *, session_id: UUID) -> Optional[ChatSession]:
        """Get a chat session by id."""
        return await crud.chat_session.get(db, id=session_id)

    async def list_sessions_for_project(
        self, db: AsyncSession, *, project_id: UUID
    ) -> list[ChatSession]:
        """List the chat sessions of a project."""
        return await crud.chat_session.get_multi_by_project(db, project_id=project_id)

    async def list_sessions_for_user(
        self, db: AsyncSession, *, user_id: UUID
    ) -> list[ChatSession]:
        """List the chat sessions of a user."""
        return await crud.chat_session.get_multi_by_user(db, user_id=user_id)

    async def _get_or_raise(self, db: AsyncSession, session_id: UUID) -> ChatSession:
        session = await crud.chat_session.get(db, id=session_id)
        if not session:
            raise NotFoundException(f"Chat session with id {session_id} not found")
        return session

    async def update_session(
        self, db: AsyncSession, *, session_id: UUID, messages: list[dict]
    ) -> ChatSession:
        """Replace the message history of a session."""
        session = await self._get_or_raise(db, session_id)
        return await crud.chat_session.update(db, db_obj=session, obj_in={"messages": messages})

    async def delete_session(self, db: AsyncSession, *, session_id: UUID) -> ChatSession:
        """Delete a chat session."""
        session = await self._get_or_raise(db, session_id)
        return await crud.chat_session.remove(db, id=session.id)

    async def send_message(
        self,
        db: AsyncSession,
        *,
        session_id: UUID,
        message_in: schemas.ChatMessageCreate,
        ctx: RequestContext,
    ) -> AsyncGenerator[str, None]:
        """Store a user message and return the stream of the reply.

        The user message and the selected model are committed before this method
        returns, so a missing session is reported before any byte is streamed.

        Args:
            db: Database session, used again while the stream runs
            session_id: Chat session to post to
            message_in: Message content and model
            ctx: Request context

        Returns:
            An async generator of server-sent event frames.

        Raises:
            NotFoundException: If the session does not exist.
        """
        session = await self._get_or_raise(db, session_id)
        messages = [*session.messages, _message("user", message_in.content)]
        session = await crud.chat_session.update(
            db, db_obj=session, obj_in={"messages": messages, "model": message_in.model}
        )
        ctx.logger.with_context(chat_session_id=str(session.id)).info(
            f"Stored user message, streaming reply from {message_in.model}"
        )
        return self._stream_reply(db, session, message_in, ctx)

    async def _stream_reply(
        self,
        db: AsyncSession,
        session: ChatSession,
        message_in: schemas.ChatMessageCreate,
        ctx: RequestContext,
    ) -> AsyncGenerator[str, None]:
        """Yield the reply word by word, then store it.

        If the consumer stops early the generator is closed or cancelled at a yield
        or a sleep, and the assistant message is never written.
        """
        reply = model_provider.chat_reply(message_in.content, message_in.model)
        for word in reply.split(" "):
            yield format_chunk(f"{word} ")
            await asyncio.sleep(settings.CHAT_STREAM_DELAY_SECONDS)

        messages = [*session.messages, _message("assistant", reply)]
        await crud.chat_session.update(db, db_obj=session, obj_in={"messages": messages})
        ctx.logger.with_context(chat_session_id=str(session.id)).info("Stored assistant reply")
        yield DONE_EVENT


chat_service = ChatService()
