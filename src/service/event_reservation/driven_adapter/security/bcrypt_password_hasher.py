import bcrypt
from pydantic import SecretStr

from src.platform.logging.loguru_io import Logger
from src.service.event_reservation.app.interface.i_password_hasher import (
    PASSWORD_MAX_BYTES,
    IPasswordHasher,
)


class BcryptPasswordHasher(IPasswordHasher):
    def __init__(self, *, rounds: int = 12) -> None:
        self.rounds = rounds

    def hash_password(self, *, plain_password: SecretStr) -> str:
        password_bytes = plain_password.get_secret_value().encode('utf-8')
        hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=self.rounds))
        return hashed.decode('utf-8')

    @Logger.io
    def verify_password(self, *, plain_password: SecretStr, hashed_password: str) -> bool:
        password_bytes = plain_password.get_secret_value().encode('utf-8')
        if len(password_bytes) > PASSWORD_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
        except ValueError:
            Logger.base.warning('[AUTH] Stored password hash is malformed')
            return False
