"""Unit of work for database transactions."""

from sqlalchemy.ext.asyncio import AsyncSession


class UnitOfWork:
    """Groups several CRUD writes into one transaction.

    Usage:
    -----
    ```python

    await crud.project.create(db, obj_in=obj_in)  # commits automatically

    async with UnitOfWork(db) as uow:
        prompt = await crud.prompt.create(db, obj_in=prompt_in, uow=uow)
        await uow.session.flush()
        await crud.prompt_version.create(db, obj_in=version_in, uow=uow)

    # Committed on a clean exit, rolled back if the block raised.
    ```

    """

    def __init__(self, session: AsyncSession):
        """Initialize the UnitOfWork with a database session.

        Args:
        ----
            session (AsyncSession): The database session.

        """
        self.session = session
        self._committed = False
        self._rolledback = False

    @property
    def committed(self) -> bool:
        """Whether the transaction has been committed."""
        return self._committed

    @property
    def rolledback(self) -> bool:
        """Whether the transaction has been rolled back."""
        return self._rolledback

    async def commit(self) -> None:
        """Commit the transaction unless it already finished."""
        if not self._committed and not self._rolledback:
            await self.session.commit()
            self._committed = True

    async def rollback(self) -> None:
        """Roll back the transaction unless it already finished."""
        if not self._committed and not self._rolledback:
            await self.session.rollback()
            self._rolledback = True

    async def __aenter__(self) -> "UnitOfWork":
        """Enter the context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Commit on a clean exit, roll back when the block raised."""
        if exc_type is not None:
            await self.rollback()
        else:
            await self.commit()
