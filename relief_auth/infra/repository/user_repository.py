"""
User repository using SQLAlchemy ORM
"""

from typing import Optional, Union
from uuid import UUID
from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from relief_auth.core.exceptions.base import ConflictError, NotFoundError
from relief_auth.core.service.auth.models.user import AccountStatus, Role, User
from relief_auth.infra.models import UserModel
from relief_auth.core.logger.logger import get_logger

logger = get_logger(__name__)


def _as_uuid(user_id: Union[str, UUID]) -> Optional[UUID]:
    if isinstance(user_id, UUID):
        return user_id
    try:
        return UUID(str(user_id))
    except ValueError:
        return None


class UserRepository:
    """Credential store: persistence of users, no business rules"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _model_to_entity(self, model: UserModel) -> User:
        """Convert SQLAlchemy model to Pydantic entity"""
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password_hash=model.password_hash,
            wallet_address=model.wallet_address,
            role=Role(model.role),
            status=AccountStatus(model.status),
            nonce=model.nonce,
            created_at=model.created_at,
            updated_at=model.updated_at
        )

    async def _fetch_one(self, *conditions) -> Optional[User]:
        stmt = select(UserModel).where(*conditions)
        result = await self.session.execute(stmt)
        user_model = result.scalar_one_or_none()
        return self._model_to_entity(user_model) if user_model else None

    async def find_by_email(self, email: str) -> Optional[User]:
        return await self._fetch_one(UserModel.email == email)

    async def find_by_wallet(self, wallet_address: str) -> Optional[User]:
        """Wallet lookup ignores EIP-55 checksum casing"""
        return await self._fetch_one(
            func.lower(UserModel.wallet_address) == wallet_address.lower()
        )

    async def find_by_id(self, user_id: Union[str, UUID]) -> Optional[User]:
        uid = _as_uuid(user_id)
        if uid is None:
            return None
        return await self._fetch_one(UserModel.id == uid)

    async def create(
        self,
        name: str,
        email: str,
        password_hash: Optional[str],
        wallet_address: str,
        role: Role,
        status: AccountStatus
    ) -> User:
        """
        Insert a new user.

        Raises:
            ConflictError: email or wallet address already registered
        """
        stmt = select(UserModel.email, UserModel.wallet_address).where(
            or_(
                UserModel.email == email,
                func.lower(UserModel.wallet_address) == wallet_address.lower()
            )
        )
        existing = (await self.session.execute(stmt)).first()
        if existing is not None:
            if existing.email == email:
                raise ConflictError("Email already exists")
            raise ConflictError("Wallet address already exists")

        new_user = UserModel(
            name=name,
            email=email,
            password_hash=password_hash,
            wallet_address=wallet_address,
            role=role.value,
            status=status.value
        )

        try:
            self.session.add(new_user)
            await self.session.commit()
        except IntegrityError as e:
            # lost a race against a concurrent registration
            await self.session.rollback()
            logger.warning(
                "User already exists (race condition)",
                extra={"email": email, "wallet_address": wallet_address, "error": str(e.orig)}
            )
            raise ConflictError("Email or wallet address already exists")

        await self.session.refresh(new_user)

        logger.info(
            "New user created in database",
            extra={
                "user_id": str(new_user.id),
                "wallet_address": wallet_address,
                "role": role.value,
                "status": status.value
            }
        )
        return self._model_to_entity(new_user)

    async def set_nonce(self, user_id: Union[str, UUID], nonce: Optional[str]) -> User:
        """
        Overwrite the user's nonce (None clears it).

        Raises:
            NotFoundError: unknown user id
        """
        uid = _as_uuid(user_id)
        if uid is None:
            raise NotFoundError("User not found")

        stmt = (
            update(UserModel)
            .where(UserModel.id == uid)
            .values(nonce=nonce, updated_at=func.now())
        )
        result = await self.session.execute(stmt)
        await self.session.commit()

        if result.rowcount != 1:
            raise NotFoundError("User not found")

        logger.debug("User nonce updated", extra={"user_id": str(uid), "cleared": nonce is None})

        user = await self.find_by_id(uid)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def consume_nonce(self, user_id: Union[str, UUID], expected_nonce: str) -> bool:
        """
        Clear the nonce only if it still equals `expected_nonce`.

        Single conditional UPDATE, so of two concurrent logins holding the same
        nonce exactly one gets True.
        """
        uid = _as_uuid(user_id)
        if uid is None or not expected_nonce:
            return False

        stmt = (
            update(UserModel)
            .where(UserModel.id == uid, UserModel.nonce == expected_nonce)
            .values(nonce=None, updated_at=func.now())
        )
        result = await self.session.execute(stmt)
        await self.session.commit()

        consumed = result.rowcount == 1
        logger.debug("User nonce consume attempted", extra={"user_id": str(uid), "consumed": consumed})
        return consumed
