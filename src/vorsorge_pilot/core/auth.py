"""Admin authentication — password hashing and login sessions.

Passwords are hashed with werkzeug.security. Accounts created before hashing
was introduced may still hold a plaintext password: it is accepted once on
login and replaced by a hash immediately (migrate_plaintext_passwords() does
the same for all accounts at startup).

The CLI keeps the session token of the logged-in admin in ``.vp_session`` at
the project root (override with VP_SESSION_FILE).
"""

import logging
import os
import secrets
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from .exceptions import AuthenticationError, NotAuthenticatedError, UserNotFoundError
from .models import AdminUser, Session

logger = logging.getLogger(__name__)

#: Prefixes of hashes produced by werkzeug.security
_HASH_PREFIXES = ("scrypt:", "pbkdf2:")


def _users():
    from ..data.repositories.users_repo import UsersRepository
    return UsersRepository()


def _sessions():
    from ..data.repositories.sessions_repo import SessionsRepository
    return SessionsRepository()


def is_hashed(stored: str) -> bool:
    return stored.startswith(_HASH_PREFIXES)


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(user: AdminUser, password: str) -> bool:
    """Check a password, upgrading a legacy plaintext password on success."""
    if is_hashed(user.password_hash):
        return check_password_hash(user.password_hash, password)
    if not secrets.compare_digest(user.password_hash, password):
        return False
    user.password_hash = hash_password(password)
    _users().update_password_hash(user.id, user.password_hash)
    logger.info("Migrated plaintext password of %s to a hash", user.username)
    return True


def create_user(username: str, password: str, role: str = "admin") -> AdminUser:
    return _users().create(AdminUser(
        username=username,
        password_hash=hash_password(password),
        role=role,
    ))


def ensure_default_admin() -> Optional[AdminUser]:
    """Create the default admin account when no users exist yet.

    Returns the created user, or None if accounts already existed.
    """
    from .config import get_config
    repo = _users()
    if repo.count() > 0:
        return None
    cfg = get_config()
    user = create_user(cfg.default_admin_user, cfg.default_admin_password)
    logger.warning(
        "Default user created: %s — change the password with 'vp auth passwd'",
        user.username,
    )
    return user


def migrate_plaintext_passwords() -> int:
    """Hash every stored plaintext password. Returns count migrated."""
    repo = _users()
    migrated = 0
    for user in repo.list_all():
        if not is_hashed(user.password_hash):
            repo.update_password_hash(user.id, hash_password(user.password_hash))
            migrated += 1
    if migrated:
        logger.info("Hashed %d plaintext password(s)", migrated)
    return migrated


def change_password(username: str, new_password: str) -> None:
    repo = _users()
    user = repo.get_by_username(username)
    if user is None:
        raise UserNotFoundError(f"User {username!r} not found")
    repo.update_password_hash(user.id, hash_password(new_password))


def login(username: str, password: str, now: Optional[datetime] = None) -> Session:
    """Check credentials and open a new session.

    Raises:
        AuthenticationError: missing credentials, unknown user or wrong password.
    """
    if not username or not password:
        raise AuthenticationError("Username and password required")

    user = _users().get_by_username(username)
    if user is None or not verify_password(user, password):
        logger.warning("Failed login for %r", username)
        raise AuthenticationError("Invalid username or password")

    from ..data.database import get_db
    from .config import get_config
    now = now or datetime.now()
    sessions = _sessions()
    with get_db().transaction():
        purged = sessions.purge_expired(now)
        session = sessions.create(Session(
            token=secrets.token_urlsafe(32),
            username=user.username,
            expires_at=now + timedelta(hours=get_config().session_hours),
        ))
    if purged:
        logger.debug("Purged %d expired session(s)", purged)
    logger.info("Login: %s", user.username)
    return session


def logout(token: str) -> bool:
    return _sessions().delete_by_token(token)


def current_user(token: Optional[str], now: Optional[datetime] = None) -> AdminUser:
    """Resolve a session token to its admin user.

    Raises:
        NotAuthenticatedError: no token, unknown token or expired session.
    """
    if not token:
        raise NotAuthenticatedError("Not logged in")
    sessions = _sessions()
    session = sessions.get_by_token(token)
    if session is None:
        raise NotAuthenticatedError("Not logged in")
    if session.is_expired(now):
        sessions.delete_by_token(token)
        raise NotAuthenticatedError("Session expired — please log in again")
    user = _users().get_by_username(session.username)
    if user is None:
        raise NotAuthenticatedError("Not logged in")
    return user


# ── CLI session token file ────────────────────────────────────────────────────

def session_file() -> Path:
    env_path = os.environ.get("VP_SESSION_FILE")
    if env_path:
        return Path(env_path)
    from ..data.database import _find_project_root
    return _find_project_root() / ".vp_session"


def save_session_token(token: str) -> None:
    path = session_file()
    path.write_text(token, encoding="utf-8")
    path.chmod(0o600)


def load_session_token() -> Optional[str]:
    path = session_file()
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8").strip() or None


def clear_session_token() -> None:
    path = session_file()
    if path.exists():
        path.unlink()
