"""
Dashboard Configuration
"""
import logging
import os
from pathlib import Path

from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)

# Base paths
BASE_DIR = Path(__file__).parent.parent
DASHBOARD_DIR = Path(__file__).parent
TEMPLATES_DIR = DASHBOARD_DIR / "templates"
STATIC_DIR = DASHBOARD_DIR / "static"

# Session configuration
SECRET_KEY = os.getenv("DASHBOARD_SECRET_KEY", "dev-secret-key-change-in-production")
SESSION_COOKIE_SECURE = os.getenv("DASHBOARD_HTTPS", "false").lower() == "true"
SESSION_LIFETIME = int(os.getenv("DASHBOARD_SESSION_LIFETIME", "3600"))  # seconds

# Roles, most privileged first. Template editing and finalizing documents
# need manager or above; every role can draft and export.
ROLES = ("admin", "manager", "staff")
EDITOR_ROLES = ("admin", "manager")

# Bootstrap admin (set via environment variables)
ADMIN_USERNAME = os.getenv("DASHBOARD_ADMIN_USER", "admin")
ADMIN_PASSWORD_HASH = os.getenv("DASHBOARD_ADMIN_PASSWORD_HASH")

# Without a configured hash, fall back to password "admin" for development.
# Generate one with werkzeug.security.generate_password_hash('your_password').
if not ADMIN_PASSWORD_HASH:
    ADMIN_PASSWORD_HASH = generate_password_hash("admin")
    logger.warning("Using default admin password. Set DASHBOARD_ADMIN_PASSWORD_HASH.")

# Application settings
APP_NAME = "Foreclosure Case Manager"
APP_VERSION = "1.0.0"
