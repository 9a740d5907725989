"""CRUD operations for the user model."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.core.datetime_utils import utc_now_naive
from promptops.crud._base import CRUDBase
from promptops.models.user import User
from promptops.schemas.user import UserCreate, UserUpdate


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    """CRUD operations for the user model."""

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[User]:
        """Get a user by email.

        Args:
        ----
            db (AsyncSession): The database session.
            email (str): The email of the user to get.

        Returns:
        -------
            Optional[User]: The user with the given email.

        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def touch_last_login(self, db: AsyncSession, *, id: UUID) -> None:
        """Stamp the last login time. Unknown ids are ignored."""
        await db.execute(update(User).where(User.id == id).values(last_login_at=utc_now_naive()))
        await db.commit()


user = CRUDUser(User)
