# backend/routes/files.py
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from context import AppContext, get_context
from utils.errors import Forbidden, Unauthorized
from utils.tokenJWT import SCOPE_FILE, decode_token, extract_token, principal_from_claims

router = APIRouter(prefix="/api", tags=["Files"])


# Stored attachments. Accepts a regular access token, or a link token
# issued for this exact file (export links).
@router.get("/files/{filename}")
def download_file(
    filename: str,
    token: Optional[str] = Depends(extract_token),
    ctx: AppContext = Depends(get_context),
):
    if not token:
        raise Unauthorized()

    claims = decode_token(ctx.settings, token)
    if claims.get("scope") == SCOPE_FILE:
        if claims.get("file") != filename:
            raise Forbidden()
    else:
        principal_from_claims(claims)

    path = ctx.files.retrieve(filename)
    return FileResponse(str(path), filename=filename)
