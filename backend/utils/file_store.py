# utils/file_store.py
import logging
import os
import re
import uuid
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from utils.errors import NotFound, PayloadTooLarge

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
_EXT_RE = re.compile(r"^[a-z0-9]{1,10}$")


def _extension(filename: Optional[str]) -> str:
    if not filename or "." not in filename:
        return ""
    ext = filename.rsplit(".", 1)[-1].lower()
    return f".{ext}" if _EXT_RE.match(ext) else ""


def upload_size(upload: UploadFile) -> int:
    stream = upload.file
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


class FileStore:
    """Flat directory of uploaded attachments addressed by generated names.

    The link between a stored file and the item it belongs to lives only
    in the database row; the filename carries no item information.
    """

    def __init__(self, directory, max_bytes: int):
        self.directory = Path(directory)
        self.max_bytes = max_bytes
        self.directory.mkdir(parents=True, exist_ok=True)

    def check_size(self, upload: UploadFile) -> None:
        size = upload_size(upload)
        if size > self.max_bytes:
            raise PayloadTooLarge(
                f"File '{upload.filename}' exceeds the {self.max_bytes} byte limit"
            )

    def store(self, upload: UploadFile) -> str:
        name = f"{uuid.uuid4().hex}{_extension(upload.filename)}"
        path = self.directory / name
        written = 0
        upload.file.seek(0)
        try:
            with open(path, "wb") as buffer:
                while True:
                    chunk = upload.file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise PayloadTooLarge(
                            f"File '{upload.filename}' exceeds the {self.max_bytes} byte limit"
                        )
                    buffer.write(chunk)
        except PayloadTooLarge:
            path.unlink(missing_ok=True)
            raise

        logger.debug("Stored upload %s as %s (%d bytes)", upload.filename, name, written)
        return name

    def retrieve(self, name: str) -> Path:
        # Only plain basenames, never paths out of the upload directory
        if not name or name.startswith(".") or Path(name).name != name or os.sep in name:
            raise NotFound()
        path = self.directory / name
        if not path.is_file():
            raise NotFound()
        return path
