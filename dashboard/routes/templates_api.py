"""
Document templates API and the insertable variable catalogue
"""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

import dashboard.config as config
from dashboard.auth import has_role, is_authenticated
from substitution import find_placeholders
from templates import TemplateManager
from variables import VARIABLES

logger = logging.getLogger(__name__)

router = APIRouter()
manager = None


def get_manager() -> TemplateManager:
    global manager
    if manager is None:
        manager = TemplateManager()
    return manager


def _unauthorized(request: Request, write: bool = False):
    if not is_authenticated(request):
        return JSONResponse({"error": "Unauthorized"}, status_code=401)
    if write and not has_role(request, *config.EDITOR_ROLES):
        return JSONResponse({"error": "Manager access required"}, status_code=403)
    return None


def _template_json(template) -> dict:
    data = template.to_dict()
    data["placeholders"] = find_placeholders(template.content)
    return data


async def _json_body(request: Request):
    """The request's JSON object, or None when the body is not one."""
    try:
        data = await request.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


@router.get("/api/variables")
async def api_variables(request: Request):
    """Tokens the editor can insert, grouped for the menu."""
    error = _unauthorized(request)
    if error:
        return error
    return JSONResponse({"variables": VARIABLES})


@router.get("/api/templates")
async def api_list_templates(request: Request):
    error = _unauthorized(request)
    if error:
        return error
    return JSONResponse({"templates": [_template_json(t) for t in get_manager().list_templates()]})


@router.get("/api/templates/{name}")
async def api_get_template(request: Request, name: str):
    error = _unauthorized(request)
    if error:
        return error
    template = get_manager().get_template(name)
    if template is None:
        return JSONResponse({"error": f"Template '{name}' not found"}, status_code=404)
    return JSONResponse({"template": _template_json(template)})


@router.post("/api/templates")
async def api_create_template(request: Request):
    """Create a template. Body: {name, content, description}."""
    error = _unauthorized(request, write=True)
    if error:
        return error
    data = await _json_body(request)
    if data is None:
        return JSONResponse({"error": "Request body must be a JSON object"}, status_code=400)
    name = (data.get("name") or "").strip()
    if not name:
        return JSONResponse({"error": "Template name is required"}, status_code=400)
    if get_manager().get_template(name) is not None:
        return JSONResponse({"error": f"Template '{name}' already exists"}, status_code=409)

    template = get_manager().save_template(name, data.get("content", ""), data.get("description", ""))
    return JSONResponse({"template": _template_json(template)}, status_code=201)


@router.put("/api/templates/{name}")
async def api_update_template(request: Request, name: str):
    """Replace a template's content and description."""
    error = _unauthorized(request, write=True)
    if error:
        return error
    existing = get_manager().get_template(name)
    if existing is None:
        return JSONResponse({"error": f"Template '{name}' not found"}, status_code=404)

    data = await _json_body(request)
    if data is None:
        return JSONResponse({"error": "Request body must be a JSON object"}, status_code=400)
    template = get_manager().save_template(
        name,
        data.get("content", existing.content),
        data.get("description", existing.description),
    )
    return JSONResponse({"template": _template_json(template)})


@router.delete("/api/templates/{name}")
async def api_delete_template(request: Request, name: str):
    error = _unauthorized(request, write=True)
    if error:
        return error
    if not get_manager().delete_template(name):
        return JSONResponse({"error": f"Template '{name}' not found"}, status_code=404)
    logger.info("Deleted template %r", name)
    return JSONResponse({"deleted": name})
