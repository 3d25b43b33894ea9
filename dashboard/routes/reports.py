"""
CSV report downloads
"""
import logging
from datetime import date

import psycopg2
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from dashboard.auth import is_authenticated
from reports import REPORT_KINDS, build_report, to_csv

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/reports/{kind}.csv")
async def download_report(request: Request, kind: str, days: int = 30):
    """Download a report as CSV (status, deadlines or financials)."""
    if not is_authenticated(request):
        return JSONResponse({"error": "Unauthorized"}, status_code=401)
    if kind not in REPORT_KINDS:
        return JSONResponse({"error": f"Unknown report: {kind}"}, status_code=404)

    try:
        headers, rows = build_report(kind, days=days)
    except psycopg2.Error as e:
        logger.exception("Could not build %s report", kind)
        return JSONResponse({"error": f"Database error: {e}"}, status_code=500)

    filename = f"{kind}_report_{date.today().isoformat()}.csv"
    return Response(
        content=to_csv(headers, rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
