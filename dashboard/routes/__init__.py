"""
FastAPI Dashboard Routes Package

Routes are organized by domain:
- main: Home page, login/logout
- documents: Document editor API (preview, print, PDF/Word export, drafts)
- templates_api: Document template CRUD and the variable catalogue
- reports: CSV report downloads
"""

from fastapi import FastAPI


def register_routes(app: FastAPI):
    """Register all route groups with the FastAPI app."""
    from .main import router as main_router
    from .documents import router as documents_router
    from .templates_api import router as templates_router
    from .reports import router as reports_router

    app.include_router(main_router)
    app.include_router(documents_router)
    app.include_router(templates_router)
    app.include_router(reports_router)
