"""User management service, including the synthetic SYSTEM actor."""

import re

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from labinventory.config import settings
from labinventory.models.base import new_ulid
from labinventory.models.enums import UserRole
from labinventory.models.types import is_ulid
from labinventory.models.user import User
from labinventory.services.users.exceptions import UserAlreadyExists, UserNotFound

logger = structlog.get_logger(__name__)

_UNSAFE_EMAIL_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


class UserService:
    """Service for lab member records."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_users(self, *, limit: int = 200) -> list[User]:
        """List users ordered by name."""
        result = await self.session.execute(select(User).order_by(User.name).limit(limit))
        return list(result.scalars().all())

    async def get_user(self, user_id: str) -> User:
        if not is_ulid(user_id):
            raise UserNotFound()
        user = await self.session.get(User, user_id)
        if user is None:
            raise UserNotFound()
        return user

    async def create_user(self, name: str, role: UserRole = UserRole.MEMBER) -> User:
        """Create a user with a synthetic unique email (no login exists yet)."""
        safe_name = _UNSAFE_EMAIL_CHARS.sub("", name).lower() or "user"
        user = User(name=name, email=f"{safe_name}-{new_ulid().lower()}@local", role=role)
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise UserAlreadyExists() from e

        logger.info("Created user", user_id=user.id, role=user.role)
        return user

    async def get_system_actor_id(self) -> str:
        """Return the id of the SYSTEM user, creating it on first use.

        Runs inside the caller's transaction. The application seeds this row
        at startup, so the insert path only runs against a fresh database;
        a concurrent creator surfaces as IntegrityError on flush.
        """
        actor = await self._find_by_email(settings.system_actor_email)
        if actor is not None:
            return actor.id

        actor = User(
            name=settings.system_actor_name,
            email=settings.system_actor_email,
            role=UserRole.ADMIN,
        )
        self.session.add(actor)
        await self.session.flush()

        logger.info("Created system actor", user_id=actor.id, email=actor.email)
        return actor.id

    async def _find_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalars().first()
