from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, MutableMapping

from courtside_core.errors import AuthError, ValidationError
from courtside_core.validation import validate_credentials, validate_password_change, validate_sign_up

from .db import Database

logger = logging.getLogger(__name__)

SESSION_KEY = "courtside_session"
PBKDF2_ITERATIONS = 240_000


@dataclass(frozen=True)
class Session:
    user_id: str
    email: str
    username: str | None
    token: str
    created_at: str


def normalize_email(email: str) -> str:
    return str(email or "").strip().lower()


def hash_password(password: str, salt: str | None = None) -> tuple[str, str]:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), PBKDF2_ITERATIONS)
    return digest.hex(), salt


def verify_password(password: str, password_hash: str, salt: str) -> bool:
    candidate, _ = hash_password(password, salt)
    return hmac.compare_digest(candidate, password_hash)


class SessionProvider:
    def __init__(self, db: Database, state: MutableMapping[str, Any] | None = None) -> None:
        self.db = db
        self.state: MutableMapping[str, Any] = state if state is not None else {}

    def _start_session(self, user: dict[str, Any]) -> Session:
        profile = self.db.get_profile(str(user["id"])) or {}
        session = Session(
            user_id=str(user["id"]),
            email=str(user["email"]),
            username=profile.get("username"),
            token=secrets.token_urlsafe(32),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self.state[SESSION_KEY] = asdict(session)
        return session

    def sign_up(self, email: str, password: str, username: str) -> Session:
        errors = validate_sign_up(email, password, username)
        if errors:
            raise ValidationError(errors)
        email = normalize_email(email)
        if self.db.get_user_by_email(email) is not None:
            raise AuthError("An account with this email already exists.")
        self.state.pop(SESSION_KEY, None)
        password_hash, salt = hash_password(password)
        user_id = self.db.create_user(email, password_hash, salt, username.strip())
        logger.info("Created account %s", user_id)
        user = self.db.get_user(user_id)
        if user is None:
            raise AuthError("Account could not be created.")
        return self._start_session(user)

    def sign_in(self, email: str, password: str) -> Session:
        self.state.pop(SESSION_KEY, None)
        errors = validate_credentials(email, password)
        if errors:
            raise ValidationError(errors)
        user = self.db.get_user_by_email(normalize_email(email))
        if user is None or not verify_password(password, str(user["password_hash"]), str(user["salt"])):
            logger.info("Rejected sign-in attempt")
            raise AuthError("Invalid email or password.")
        logger.info("Signed in %s", user["id"])
        return self._start_session(user)

    def sign_out(self) -> None:
        session = self.state.pop(SESSION_KEY, None)
        if session:
            logger.info("Signed out %s", session.get("user_id"))

    def current_session(self) -> Session | None:
        raw = self.state.get(SESSION_KEY)
        if not raw:
            return None
        return Session(**raw)

    def current_user(self) -> str | None:
        session = self.current_session()
        return session.user_id if session else None

    def require_user(self) -> str:
        user_id = self.current_user()
        if user_id is None:
            raise AuthError("You must be signed in.")
        return user_id

    def refresh_username(self) -> None:
        session = self.current_session()
        if session is None:
            return
        profile = self.db.get_profile(session.user_id) or {}
        self.state[SESSION_KEY] = {**asdict(session), "username": profile.get("username")}

    def change_password(self, current: str, new: str, confirm: str) -> None:
        errors = validate_password_change(current, new, confirm)
        if errors:
            raise ValidationError(errors)
        user = self.db.get_user(self.require_user())
        if user is None or not verify_password(current, str(user["password_hash"]), str(user["salt"])):
            raise AuthError("Current password is incorrect.")
        password_hash, salt = hash_password(new)
        self.db.update_user_password(str(user["id"]), password_hash, salt)
        logger.info("Password changed for %s", user["id"])
