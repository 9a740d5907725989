"""CRUD operations for chat sessions."""

from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.crud._base import CRUDBase
from promptops.models.chat_session import ChatSession
from promptops.schemas.chat import ChatSessionCreate, ChatSessionUpdate


class CRUDChatSession(CRUDBase[ChatSession, ChatSessionCreate, ChatSessionUpdate]):
    """CRUD operations for the chat session model."""

    async def get_multi_by_project(
        self, db: AsyncSession, *, project_id: UUID
    ) -> list[ChatSession]:
        """Get all chat sessions of a project, most recently active first."""
        query = (
            select(ChatSession)
            .where(ChatSession.project_id == project_id)
            .order_by(desc(ChatSession.modified_at))
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_multi_by_user(self, db: AsyncSession, *, user_id: UUID) -> list[ChatSession]:
        """Get all chat sessions of a user, most recently active first."""
        query = (
            select(ChatSession)
            .where(ChatSession.user_id == user_id)
            .order_by(desc(ChatSession.modified_at))
        )
        result = await db.execute(query)
        return list(result.scalars().all())


chat_session = CRUDChatSession(ChatSession)
