# utils/intake.py
"""Submission pipeline for logistics requests.

A submission goes through four stages, in this order:

1. the multipart fields and the items JSON are validated,
2. uploads are matched to items and size-checked,
3. matched uploads are written to the file store,
4. the requester, the request and its items are committed together.

Nothing reaches the database unless every item is valid. Files written in
stage 3 are not removed if stage 4 fails; they stay on disk unreferenced.
"""
import json
import logging
from typing import List, Optional, Sequence

import pydantic
from fastapi import UploadFile
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from context import AppContext
from models.request import Item, Request
from models.users import ROLE_USER, User
from schemas.request import ItemIn, RequestSubmission
from utils.errors import ParseError, StorageError, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (("name", "name"), ("email", "email"), ("team_name", "teamName"), ("items", "items"))


def _describe(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        # Drop pydantic's "Value error, " prefix from custom validators
        msg = msg.replace("Value error, ", "")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def build_submission(name, email, team_name, items) -> RequestSubmission:
    values = {"name": name, "email": email, "team_name": team_name, "items": items}
    missing = [label for key, label in REQUIRED_FIELDS if not (values[key] or "").strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    try:
        return RequestSubmission(**values)
    except pydantic.ValidationError as exc:
        raise ValidationError(_describe(exc))


def parse_items(raw: str) -> List[ItemIn]:
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        raise ParseError("Items must be valid JSON")
    if not isinstance(data, list):
        raise ParseError("Items must be a JSON array")
    if not data:
        raise ValidationError("At least one item is required")

    items = []
    for idx, entry in enumerate(data, start=1):
        if not isinstance(entry, dict):
            raise ValidationError(f"Item {idx}: must be an object")
        try:
            items.append(ItemIn.model_validate(entry))
        except pydantic.ValidationError as exc:
            raise ValidationError(f"Item {idx}: {_describe(exc)}")
    return items


def match_attachments(items: Sequence[ItemIn], files: Sequence[UploadFile]) -> List[Optional[UploadFile]]:
    """Return the upload belonging to each item, or None.

    When any item names an ``attachment``, uploads are matched by client
    filename and every upload must be claimed exactly once. Otherwise the
    Nth upload goes to the Nth item.
    """
    files = [f for f in files if f is not None and f.filename]

    if not any(item.attachment for item in items):
        if len(files) > len(items):
            raise ValidationError(
                f"Received {len(files)} files for {len(items)} items"
            )
        return [files[idx] if idx < len(files) else None for idx in range(len(items))]

    by_name = {}
    for upload in files:
        if upload.filename in by_name:
            raise ValidationError(f"Duplicate upload filename '{upload.filename}'")
        by_name[upload.filename] = upload

    matched: List[Optional[UploadFile]] = []
    claimed = set()
    for idx, item in enumerate(items, start=1):
        if not item.attachment:
            matched.append(None)
            continue
        if item.attachment not in by_name:
            raise ValidationError(f"Item {idx}: attachment '{item.attachment}' was not uploaded")
        if item.attachment in claimed:
            raise ValidationError(f"Item {idx}: attachment '{item.attachment}' is used by another item")
        claimed.add(item.attachment)
        matched.append(by_name[item.attachment])

    unclaimed = sorted(set(by_name) - claimed)
    if unclaimed:
        raise ValidationError(f"Uploaded files not referenced by any item: {', '.join(unclaimed)}")
    return matched


def resolve_user(db: Session, email: str, name: str, team_name: str) -> User:
    """Find the requester by email or add a password-less USER account.

    The new row is flushed, not committed, so it shares the caller's
    transaction.
    """
    normalized = normalize_email(email)
    user = db.query(User).filter(func.lower(User.email) == normalized).first()
    if user is not None:
        return user

    user = User(email=normalized, name=name, team_name=team_name, password_hash="", role=ROLE_USER)
    db.add(user)
    db.flush()
    logger.info("Created requester account %s", normalized)
    return user


def submit_request(
    ctx: AppContext,
    db: Session,
    submission: RequestSubmission,
    files: Sequence[UploadFile],
) -> Request:
    items = parse_items(submission.items)
    uploads = match_attachments(items, files)

    for upload in uploads:
        if upload is not None:
            ctx.files.check_size(upload)

    stored = [ctx.files.store(upload) if upload is not None else None for upload in uploads]

    try:
        user = resolve_user(db, submission.email, submission.name, submission.team_name)
        request = Request(
            user=user,
            items=[
                Item(
                    name=item.name,
                    description=item.description,
                    quantity=item.quantity,
                    price=item.price,
                    source=item.source,
                    sample_file=sample_file,
                )
                for item, sample_file in zip(items, stored)
            ],
        )
        db.add(request)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        orphaned = [name for name in stored if name]
        if orphaned:
            logger.warning("Request not saved, orphaned uploads left on disk: %s", ", ".join(orphaned))
        logger.exception("Failed to persist request for %s", submission.email)
        raise StorageError("Could not save request")

    db.refresh(request)
    logger.info("Request %s created with %d items", request.id, len(items))
    return request


def list_requests(db: Session) -> List[Request]:
    return (
        db.query(Request)
        .options(joinedload(Request.user), selectinload(Request.items))
        .order_by(Request.created_at.desc(), Request.id.desc())
        .all()
    )
