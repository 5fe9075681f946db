from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel
from siwe import (
    DomainMismatch,
    ExpiredMessage,
    InvalidSignature,
    NonceMismatch,
    NotYetValidMessage,
    SiweMessage,
    VerificationError,
)
from web3 import Web3

from relief_auth.core.logger.logger import get_logger

logger = get_logger(__name__)


class SiweErrorType(str, Enum):
    INVALID_MESSAGE = "invalid_message"
    INVALID_SIGNATURE = "invalid_signature"
    NONCE_MISMATCH = "nonce_mismatch"
    EXPIRED_MESSAGE = "expired_message"
    NOT_YET_VALID_MESSAGE = "not_yet_valid_message"
    DOMAIN_MISMATCH = "domain_mismatch"


# siwe failure -> result type; anything else it raises counts as a bad signature
_ERROR_TYPES = (
    (ExpiredMessage, SiweErrorType.EXPIRED_MESSAGE, "Message has expired"),
    (NotYetValidMessage, SiweErrorType.NOT_YET_VALID_MESSAGE, "Message is not yet valid"),
    (NonceMismatch, SiweErrorType.NONCE_MISMATCH, "Nonce does not match"),
    (DomainMismatch, SiweErrorType.DOMAIN_MISMATCH, "Domain does not match"),
    (InvalidSignature, SiweErrorType.INVALID_SIGNATURE, "Signature does not match address of the message"),
)


def parse_message(text: str) -> SiweMessage:
    """Parse EIP-4361 text. Raises ValueError when it is not a well-formed message."""
    if not isinstance(text, str) or not text.strip():
        raise ValueError("Message is empty")
    try:
        return SiweMessage.from_message(message=text, abnf=True)
    except ValueError:
        raise
    except Exception as e:
        # the ABNF grammar raises its own ParseError
        raise ValueError(f"Malformed message: {e}") from e


class SiweVerificationResult(BaseModel):
    success: bool
    address: Optional[str] = None
    error_type: Optional[SiweErrorType] = None
    error: Optional[str] = None
    message: Optional[SiweMessage] = None

    @classmethod
    def failure(
        cls,
        error_type: SiweErrorType,
        error: str,
        message: Optional[SiweMessage] = None
    ) -> "SiweVerificationResult":
        return cls(success=False, error_type=error_type, error=error, message=message)


class SignatureVerificationService:
    """Verifies Sign-In with Ethereum messages signed with personal_sign"""

    def __init__(self, domain: Optional[str] = None):
        self.domain = domain

    def verify(
        self,
        message: str,
        signature: str,
        expected_nonce: str,
        now: Optional[datetime] = None
    ) -> SiweVerificationResult:
        """
        Check that `message` is a sign-in message signed by its own address,
        bound to `expected_nonce` and currently within its validity window.

        Never raises; every failure is reported in the result.
        """
        try:
            parsed = parse_message(message)
        except ValueError as e:
            logger.warning("Sign-in message could not be parsed", extra={"error": str(e)})
            return SiweVerificationResult.failure(SiweErrorType.INVALID_MESSAGE, str(e))

        if not expected_nonce:
            logger.warning("No nonce outstanding", extra={"wallet_address": parsed.address})
            return SiweVerificationResult.failure(
                SiweErrorType.NONCE_MISMATCH, "Nonce does not match", parsed
            )

        try:
            parsed.verify(
                signature,
                domain=self.domain,
                nonce=expected_nonce,
                timestamp=now,
            )
        except VerificationError as e:
            error_type, error = SiweErrorType.INVALID_SIGNATURE, "Invalid signature"
            for exc_type, mapped_type, mapped_error in _ERROR_TYPES:
                if isinstance(e, exc_type):
                    error_type, error = mapped_type, mapped_error
                    break
            logger.warning(
                "Sign-in message rejected",
                extra={"wallet_address": parsed.address, "error_type": error_type.value}
            )
            return SiweVerificationResult.failure(error_type, error, parsed)
        except Exception as e:
            # eth_keys raises BadSignature (not a ValueError) for out-of-range v/r/s
            logger.warning(
                "Signature recovery failed",
                extra={"wallet_address": parsed.address, "error": str(e)}
            )
            return SiweVerificationResult.failure(
                SiweErrorType.INVALID_SIGNATURE, "Invalid signature", parsed
            )

        address = Web3.to_checksum_address(parsed.address)
        logger.info(
            "Sign-in message verified",
            extra={"wallet_address": address, "chain_id": parsed.chain_id}
        )
        return SiweVerificationResult(success=True, address=address, message=parsed)
