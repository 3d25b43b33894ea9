"""
Main dashboard routes: case list, document editor page, login/logout
"""
import logging
from pathlib import Path

from fastapi import APIRouter, Form, Request
from psycopg2.errors import InvalidTextRepresentation
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from dashboard.auth import is_authenticated, login_user, logout_user
from db.cases import get_case, list_cases
from documents import DocumentGenerator
from models import CaseStatus, DocumentType
from variables import VARIABLES

logger = logging.getLogger(__name__)

router = APIRouter()
templates = Jinja2Templates(directory=Path(__file__).parent.parent / "templates")
generator = DocumentGenerator()


@router.get("/", response_class=HTMLResponse)
async def index(request: Request, status: str = None):
    """Case list."""
    if not is_authenticated(request):
        return RedirectResponse(url="/login", status_code=303)

    selected = CaseStatus(status) if status in {s.value for s in CaseStatus} else None
    cases = list_cases(status=selected)

    return templates.TemplateResponse(request, "index.html", {
        "cases": cases,
        "statuses": [s.value for s in CaseStatus],
        "selected_status": status,
        "username": request.session.get("username"),
    })


@router.get("/cases/{case_id}/documents/new", response_class=HTMLResponse)
async def document_editor(request: Request, case_id: str, type: str = DocumentType.OTHER.value):
    """Document editor, pre-filled from the template named after the document type."""
    if not is_authenticated(request):
        return RedirectResponse(url="/login", status_code=303)

    try:
        case = get_case(case_id)
    except InvalidTextRepresentation:
        # Not a UUID, so no such case
        case = None
    if case is None:
        return RedirectResponse(url="/", status_code=303)

    template_names = [t.name for t in generator.templates.list_templates()]
    return templates.TemplateResponse(request, "documents.html", {
        "case": case,
        "document_type": type,
        "document_types": [t.value for t in DocumentType],
        "title": generator.default_title(type, case),
        "content": generator.initial_content(type if type in template_names else None),
        "template_names": template_names,
        "variables": VARIABLES,
        "username": request.session.get("username"),
    })


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    """Login page."""
    if is_authenticated(request):
        return RedirectResponse(url="/", status_code=303)
    return templates.TemplateResponse(request, "login.html", {"error": None})


@router.post("/login")
async def login_submit(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
):
    """Handle login form submission."""
    if login_user(request, username, password):
        # 303 See Other forces GET on redirect
        return RedirectResponse(url="/", status_code=303)

    return templates.TemplateResponse(
        request, "login.html", {"error": "Invalid username or password."}, status_code=401
    )


@router.get("/logout")
async def logout(request: Request):
    """Logout route."""
    logout_user(request)
    return RedirectResponse(url="/login", status_code=303)
