from typing import Any, Dict, Optional

from sqlalchemy.orm import Session
from models.log import Log


def write_log(
    db: Session,
    *,
    user_id: Optional[int],
    action: str,
    resource: str,
    status: str = "SUCCESS",
    ip: Optional[str] = None,
    meta: Optional[Dict[str, Any]] = None,
) -> None:
    entry = Log(user_id=user_id, action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    db.commit()


def client_ip(request) -> Optional[str]:
    return request.client.host if request is not None and request.client else None
