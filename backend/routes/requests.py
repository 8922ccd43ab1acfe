# backend/routes/requests.py
import logging
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from context import AppContext, get_context, get_db
from models.users import ROLE_ADMIN
from schemas.request import RequestOut
from schemas.user import Principal
from utils.audit import client_ip, write_log
from utils.export import EXPORT_FILENAME, XLSX_MEDIA_TYPE, build_export_rows, render_workbook
from utils.intake import build_submission, list_requests, submit_request
from utils.tokenJWT import create_file_token, role_required

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Requests"])

admin_only = role_required(ROLE_ADMIN)


# The audited action is already committed; a failed audit entry only gets logged
def _audit(db: Session, **entry) -> None:
    try:
        write_log(db, **entry)
    except SQLAlchemyError as log_e:
        db.rollback()
        logger.exception("Failed to write audit log for %s: %s", entry.get("action"), log_e)


# =========================
# SUBMISSION (public form)
# =========================
@router.post("/requests", response_model=RequestOut)
@router.post("/submit", response_model=RequestOut, include_in_schema=False)
def create_request(
    request: Request,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    team_name: Optional[str] = Form(None, alias="teamName"),
    items: Optional[str] = Form(None),
    files: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    submission = build_submission(name, email, team_name, items)
    try:
        created = submit_request(ctx, db, submission, files or [])
    finally:
        for upload in files or []:
            upload.file.close()

    out = RequestOut.model_validate(created)
    _audit(db, user_id=out.user_id, action="REQUEST_SUBMIT", resource="requests",
           ip=client_ip(request), meta={"request_id": out.id, "items": len(out.items)})
    return out


# =========================
# ADMIN LISTING
# =========================
@router.get("/requests", response_model=List[RequestOut])
def get_requests(
    db: Session = Depends(get_db),
    principal: Principal = Depends(admin_only),
):
    return [RequestOut.model_validate(r) for r in list_requests(db)]


# =========================
# SPREADSHEET EXPORT
# =========================
@router.get("/requests/export")
@router.get("/export", include_in_schema=False)
def export_requests(
    request: Request,
    db: Session = Depends(get_db),
    ctx: AppContext = Depends(get_context),
    principal: Principal = Depends(admin_only),
):
    base_url = ctx.settings.PUBLIC_BASE_URL.rstrip("/")

    def link_for(filename: str) -> str:
        token = create_file_token(ctx.settings, filename)
        return f"{base_url}/api/files/{quote(filename)}?token={token}"

    rows = build_export_rows(list_requests(db), link_for)
    content = render_workbook(rows)
    logger.info("Exported %d rows for user %s", len(rows), principal.user_id)

    _audit(db, user_id=principal.user_id, action="REQUEST_EXPORT", resource="requests",
           ip=client_ip(request), meta={"rows": len(rows)})

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
