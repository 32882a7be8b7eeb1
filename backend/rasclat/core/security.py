from datetime import datetime, timedelta, timezone
import jwt
from passlib.context import CryptContext
from .config import get_settings

# bcrypt verifies hashes imported from the previous user collection
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")
settings = get_settings()
ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    pass


def hash_password(password: str) -> str:
    return pwd_context.hash(password.strip())


def verify_password(password: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(password.strip(), hashed)
    except (ValueError, TypeError):
        return False


def create_access_token(username: str, role: str = "admin", expires_seconds: int | None = None) -> str:
    if expires_seconds is None:
        expires_seconds = settings.token_life_seconds
    expire = datetime.now(timezone.utc) + timedelta(seconds=expires_seconds)
    payload = {"user": {"username": username, "role": role}, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Return the ``user`` claim of a valid token, raise InvalidTokenError otherwise."""
    try:
        data = jwt.decode(token, settings.jwt_secret, algorithms=[ALGORITHM])
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(str(exc)) from exc
    user = data.get("user")
    if not isinstance(user, dict) or not user.get("username"):
        raise InvalidTokenError("token carries no user")
    return user
