"""Fernet-based password protection."""

import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from machine_enroll.exceptions import ProtectionException
from machine_enroll.interfaces import PasswordProtector

logger = logging.getLogger(__name__)


class FernetPasswordProtector(PasswordProtector):
    def __init__(self, key: Optional[str] = None):
        if key is None:
            logger.warning(
                "No encryption_key configured, generating a key for this process only. "
                "Protected passwords will not be readable after restart."
            )
            key = Fernet.generate_key().decode()
        try:
            self._fernet = Fernet(key.encode())
        except ValueError as e:
            raise ProtectionException(f"Invalid encryption key: {e}") from e

    def protect(self, password: str) -> str:
        return self._fernet.encrypt(password.encode()).decode()

    def unprotect(self, protected: str) -> str:
        try:
            return self._fernet.decrypt(protected.encode()).decode()
        except InvalidToken as e:
            raise ProtectionException(
                "Protected password cannot be decrypted with the configured key"
            ) from e
