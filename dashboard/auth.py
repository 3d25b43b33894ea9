"""
Dashboard Authentication for FastAPI

Users live in PostgreSQL with werkzeug password hashes. The session keeps
the username and role; route handlers check them with is_authenticated()
and has_role().
"""
import logging
from typing import Optional

import psycopg2
from fastapi import Request
from werkzeug.security import check_password_hash, generate_password_hash

import dashboard.config as config
from db.connection import get_connection

logger = logging.getLogger(__name__)

USERS_SCHEMA = """
CREATE TABLE IF NOT EXISTS dashboard_users (
    id SERIAL PRIMARY KEY,
    username TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    email TEXT,
    role TEXT NOT NULL DEFAULT 'staff',
    is_active BOOLEAN DEFAULT TRUE,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    last_login TIMESTAMP
)
"""


def init_users_table():
    """Create users table if it doesn't exist."""
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(USERS_SCHEMA)


def create_user(username: str, password: str, email: str = None, role: str = "staff") -> bool:
    """
    Create a user, or reactivate and reset an existing one.

    Args:
        username: Unique username
        password: Plain text password (will be hashed)
        email: Optional email address
        role: One of config.ROLES

    Returns:
        bool: True if saved
    """
    if role not in config.ROLES:
        raise ValueError(f"Unknown role {role!r} (expected one of {', '.join(config.ROLES)})")

    init_users_table()
    try:
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO dashboard_users (username, password_hash, email, role)
                VALUES (%s, %s, %s, %s)
                ON CONFLICT (username) DO UPDATE SET
                    password_hash = EXCLUDED.password_hash,
                    email = EXCLUDED.email,
                    role = EXCLUDED.role,
                    is_active = TRUE
                """,
                (username, generate_password_hash(password), email, role),
            )
        return True
    except psycopg2.Error as e:
        logger.error("Could not create user %s: %s", username, e)
        return False


def get_user(username: str) -> Optional[dict]:
    """Active user by username."""
    init_users_table()
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT id, username, password_hash, email, role, is_active, created_at, last_login
            FROM dashboard_users
            WHERE username = %s AND is_active = TRUE
            """,
            (username,),
        )
        row = cur.fetchone()
    return dict(row) if row else None


def list_users() -> list:
    init_users_table()
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT id, username, email, role, is_active, created_at, last_login
            FROM dashboard_users
            ORDER BY created_at DESC
            """
        )
        return [dict(r) for r in cur.fetchall()]


def update_last_login(username: str):
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            "UPDATE dashboard_users SET last_login = CURRENT_TIMESTAMP WHERE username = %s",
            (username,),
        )


def _start_session(request: Request, username: str, role: str):
    request.session["logged_in"] = True
    request.session["username"] = username
    request.session["role"] = role


def login_user(request: Request, username: str, password: str) -> bool:
    """
    Authenticate user credentials.

    Checks database users first, then the bootstrap admin from the environment.

    Returns:
        bool: True if authentication successful, False otherwise
    """
    user = get_user(username)
    if user and check_password_hash(user["password_hash"], password):
        _start_session(request, username, user["role"])
        update_last_login(username)
        logger.info("User %s logged in (%s)", username, user["role"])
        return True

    if username == config.ADMIN_USERNAME and check_password_hash(config.ADMIN_PASSWORD_HASH, password):
        _start_session(request, username, "admin")
        logger.info("Bootstrap admin logged in")
        return True

    logger.info("Failed login for %s", username)
    return False


def logout_user(request: Request):
    """Clear user session."""
    request.session.clear()


def is_authenticated(request: Request) -> bool:
    return request.session.get("logged_in", False)


def get_current_user(request: Request) -> Optional[str]:
    if is_authenticated(request):
        return request.session.get("username")
    return None


def get_current_role(request: Request) -> Optional[str]:
    if is_authenticated(request):
        return request.session.get("role", "staff")
    return None


def has_role(request: Request, *roles: str) -> bool:
    """True if the logged-in user holds one of roles."""
    return get_current_role(request) in roles
