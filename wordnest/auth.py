import logging
import time

from jose import JWTError, jwt
from pydantic import ValidationError

from .models.auth_models import AuthResponse, UserProfile

logger = logging.getLogger(__name__)

TOKEN_KEY = "auth_token"
USER_KEY = "auth_user"


def token_expired(token: str, now: float | None = None) -> bool:
    # Opaque (non-JWT) tokens carry no expiry; the server decides.
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return False
    expires_at = claims.get("exp")
    if not isinstance(expires_at, (int, float)):
        return False
    return expires_at <= (now if now is not None else time.time())


class AuthSession:
    """Sign-in state kept in the on-device store.

    Nothing is cached: every question is answered from the store, so a
    sign-in or sign-out is visible to the next operation.
    """

    def __init__(self, local_store):
        self.local_store = local_store

    def get_token(self) -> str | None:
        token = self.local_store.get_json(TOKEN_KEY)
        if not isinstance(token, str) or not token:
            return None
        return token

    def is_authenticated(self) -> bool:
        token = self.get_token()
        if token is None:
            return False
        if token_expired(token):
            logger.info("Stored auth token has expired")
            return False
        return True

    def current_user(self) -> UserProfile | None:
        if not self.is_authenticated():
            return None
        raw = self.local_store.get_json(USER_KEY)
        if not isinstance(raw, dict):
            return None
        try:
            return UserProfile.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding unreadable stored user profile")
            return None

    def sign_in(self, auth: AuthResponse) -> UserProfile:
        user = UserProfile(id=auth.id, username=auth.username, email=auth.email)
        self.local_store.set_json(TOKEN_KEY, auth.token)
        self.local_store.set_json(USER_KEY, user.model_dump(by_alias=True))
        return user

    def sign_out(self) -> None:
        self.local_store.remove_key(TOKEN_KEY)
        self.local_store.remove_key(USER_KEY)
