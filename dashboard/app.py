"""
FastAPI Dashboard Application
"""
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

# Load .env before reading dashboard settings
load_dotenv(Path(__file__).parent.parent / ".env")

import dashboard.config as config
from dashboard.routes import register_routes

app = FastAPI(
    title=config.APP_NAME,
    version=config.APP_VERSION,
)

# Session middleware for login state
app.add_middleware(
    SessionMiddleware,
    secret_key=config.SECRET_KEY,
    max_age=config.SESSION_LIFETIME,
    same_site="lax",
    https_only=config.SESSION_COOKIE_SECURE,
    path="/",
)

app.mount("/static", StaticFiles(directory=config.STATIC_DIR), name="static")

register_routes(app)


def run_server(host: str = "127.0.0.1", port: int = 8000, reload: bool = False):
    """Run the dashboard server."""
    import uvicorn
    uvicorn.run(
        "dashboard.app:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    run_server(reload=True)
