import secrets
import string
from typing import Union
from uuid import UUID

from relief_auth.core.logger.logger import get_logger
from relief_auth.infra.config.settings import settings
from relief_auth.infra.repository.user_repository import UserRepository

logger = get_logger(__name__)

# EIP-4361 nonces are restricted to ASCII letters and digits
NONCE_ALPHABET = string.ascii_letters + string.digits
MIN_NONCE_LENGTH = 22  # 22 * log2(62) > 128 bits


def generate_nonce(length: int = settings.NONCE_LENGTH) -> str:
    """Generate a cryptographically secure alphanumeric nonce"""
    length = max(length, MIN_NONCE_LENGTH)
    return "".join(secrets.choice(NONCE_ALPHABET) for _ in range(length))


class NonceService:
    """Issues single-use sign-in nonces bound to a user"""

    def __init__(self, user_repository: UserRepository, length: int = settings.NONCE_LENGTH):
        self.user_repository = user_repository
        self.length = length

    async def issue(self, user_id: Union[str, UUID]) -> str:
        """Store a fresh nonce for the user, replacing any unused one"""
        nonce = generate_nonce(self.length)
        await self.user_repository.set_nonce(user_id, nonce)
        logger.info("Nonce issued", extra={"user_id": str(user_id)})
        return nonce
