from abc import ABC, abstractmethod

from pydantic import SecretStr


# bcrypt only looks at the first 72 bytes and newer releases refuse anything longer
PASSWORD_MAX_BYTES = 72


class IPasswordHasher(ABC):
    """Hashing port; plaintext only ever travels wrapped in SecretStr"""

    @abstractmethod
    def hash_password(self, *, plain_password: SecretStr) -> str:
        pass

    @abstractmethod
    def verify_password(self, *, plain_password: SecretStr, hashed_password: str) -> bool:
        """False for a wrong password or a malformed hash; never raises on bad input"""
        pass
