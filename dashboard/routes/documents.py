"""
Document editor API: preview, print view, PDF/Word export, drafts
"""
import logging

import psycopg2
from fastapi import APIRouter, Request
from psycopg2.errors import InvalidTextRepresentation
from fastapi.responses import HTMLResponse, JSONResponse, Response

import dashboard.config as config
from dashboard.auth import has_role, is_authenticated
from db.cases import get_case
from db.documents import get_document
from documents import DocumentError, DocumentGenerator, DocumentStatusError, RenderError
from models import DocumentType

logger = logging.getLogger(__name__)

router = APIRouter()
generator = DocumentGenerator()

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _document_type(value) -> DocumentType:
    """Parse a document type label; raises ValueError for unknown labels."""
    return DocumentType(value or DocumentType.OTHER.value)


async def _editor_request(request: Request, case_id: str):
    """
    Shared checks for editor endpoints.

    Returns (case, payload, None) or (None, None, error response).
    """
    if not is_authenticated(request):
        return None, None, JSONResponse({"error": "Unauthorized"}, status_code=401)
    try:
        payload = await request.json()
    except ValueError:
        return None, None, JSONResponse({"error": "Request body must be JSON"}, status_code=400)
    if not isinstance(payload, dict):
        return None, None, JSONResponse({"error": "Request body must be a JSON object"}, status_code=400)
    try:
        case = get_case(case_id)
    except InvalidTextRepresentation:
        # Not a UUID, so no such case
        case = None
    except psycopg2.Error as e:
        logger.exception("Could not load case %s", case_id)
        return None, None, JSONResponse({"error": f"Database error: {e}"}, status_code=500)
    if case is None:
        return None, None, JSONResponse({"error": f"Case {case_id} not found"}, status_code=404)
    return case, payload, None


@router.post("/api/cases/{case_id}/documents/preview")
async def preview_document(request: Request, case_id: str):
    """Merged HTML for the preview pane."""
    case, payload, error = await _editor_request(request, case_id)
    if error:
        return error
    return JSONResponse({"html": generator.preview(payload.get("content", ""), case)})


@router.post("/api/cases/{case_id}/documents/print", response_class=HTMLResponse)
async def print_document(request: Request, case_id: str):
    """Printable HTML page of the merged document."""
    case, payload, error = await _editor_request(request, case_id)
    if error:
        return error
    html = generator.print_view(
        payload.get("content", ""),
        case,
        title=payload.get("title") or generator.default_title(payload.get("type"), case),
        font=payload.get("font") or "'Times New Roman', serif",
    )
    return HTMLResponse(html)


async def _export(request: Request, case_id: str, extension: str):
    case, payload, error = await _editor_request(request, case_id)
    if error:
        return error
    try:
        document_type = _document_type(payload.get("type"))
    except ValueError:
        return JSONResponse({"error": f"Unknown document type: {payload.get('type')}"}, status_code=400)

    title = payload.get("title") or ""
    try:
        if extension == "pdf":
            body = generator.render_pdf(payload.get("content", ""), case, document_type, title=title)
            media_type = "application/pdf"
        else:
            body = generator.render_docx(payload.get("content", ""), case, document_type, title=title)
            media_type = DOCX_MEDIA_TYPE
    except RenderError as e:
        logger.error("Export failed: %s", e)
        return JSONResponse({"error": str(e)}, status_code=500)

    filename = generator.download_filename(title, case, document_type, extension=extension)
    return Response(
        content=body,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/api/cases/{case_id}/documents/pdf")
async def export_pdf(request: Request, case_id: str):
    return await _export(request, case_id, "pdf")


@router.post("/api/cases/{case_id}/documents/docx")
async def export_docx(request: Request, case_id: str):
    return await _export(request, case_id, "docx")


@router.post("/api/cases/{case_id}/documents/save")
async def save_document(request: Request, case_id: str):
    """Save the merged document as a Draft."""
    case, payload, error = await _editor_request(request, case_id)
    if error:
        return error
    try:
        document_type = _document_type(payload.get("type"))
    except ValueError:
        return JSONResponse({"error": f"Unknown document type: {payload.get('type')}"}, status_code=400)

    try:
        document = generator.save_draft(case, payload.get("title") or "", document_type, payload.get("content", ""))
    except psycopg2.Error as e:
        logger.exception("Could not save document for case %s", case_id)
        return JSONResponse({"error": f"Database error: {e}"}, status_code=500)

    return JSONResponse({"document": document.to_dict()}, status_code=201)


@router.post("/api/documents/{document_id}/finalize")
async def finalize_document(request: Request, document_id: str):
    """Draft -> Finalized. Managers and admins only."""
    if not is_authenticated(request):
        return JSONResponse({"error": "Unauthorized"}, status_code=401)
    if not has_role(request, *config.EDITOR_ROLES):
        return JSONResponse({"error": "Manager access required"}, status_code=403)

    try:
        try:
            document = get_document(document_id)
        except InvalidTextRepresentation:
            document = None
        if document is None:
            return JSONResponse({"error": f"Document {document_id} not found"}, status_code=404)
        document = generator.finalize(document)
    except DocumentStatusError as e:
        return JSONResponse({"error": str(e)}, status_code=409)
    except DocumentError as e:
        return JSONResponse({"error": str(e)}, status_code=404)
    except psycopg2.Error as e:
        logger.exception("Could not finalize document %s", document_id)
        return JSONResponse({"error": f"Database error: {e}"}, status_code=500)

    return JSONResponse({"document": document.to_dict()})
