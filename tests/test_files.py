import io

import pytest
from starlette.datastructures import UploadFile

from conftest import make_item, submit
from utils.errors import NotFound, PayloadTooLarge
from utils.file_store import FileStore
from utils.tokenJWT import create_file_token


def stored_name(client):
    resp = submit(client, [make_item()], files=[("files", ("notes.txt", b"hello", "text/plain"))])
    return resp.json()["items"][0]["sampleFile"]


def test_store_generates_unique_names(tmp_path):
    store = FileStore(tmp_path, max_bytes=100)
    first = store.store(UploadFile(file=io.BytesIO(b"a"), filename="Quote.PDF"))
    second = store.store(UploadFile(file=io.BytesIO(b"b"), filename="Quote.PDF"))
    assert first != second
    assert first.endswith(".pdf")
    assert store.retrieve(first).read_bytes() == b"a"


def test_store_drops_odd_extensions(tmp_path):
    store = FileStore(tmp_path, max_bytes=100)
    name = store.store(UploadFile(file=io.BytesIO(b"a"), filename="archive.tar/../x y"))
    assert "." not in name


def test_check_size(tmp_path):
    store = FileStore(tmp_path, max_bytes=4)
    store.check_size(UploadFile(file=io.BytesIO(b"1234"), filename="ok.txt"))
    with pytest.raises(PayloadTooLarge):
        store.check_size(UploadFile(file=io.BytesIO(b"12345"), filename="big.txt"))


def test_store_aborts_over_limit(tmp_path):
    store = FileStore(tmp_path, max_bytes=4)
    with pytest.raises(PayloadTooLarge):
        store.store(UploadFile(file=io.BytesIO(b"12345"), filename="big.txt"))
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize("name", ["", "../secret", ".hidden", "missing.pdf", "a/b"])
def test_retrieve_unknown_names(tmp_path, name):
    store = FileStore(tmp_path, max_bytes=4)
    with pytest.raises(NotFound):
        store.retrieve(name)


def test_download_with_access_token(client, admin_headers):
    name = stored_name(client)
    resp = client.get(f"/api/files/{name}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.content == b"hello"


def test_download_requires_credentials(client):
    name = stored_name(client)
    assert client.get(f"/api/files/{name}").status_code == 401


def test_file_token_is_scoped_to_one_file(client, settings):
    name = stored_name(client)
    other = stored_name(client)
    token = create_file_token(settings, name)
    assert client.get(f"/api/files/{name}", params={"token": token}).status_code == 200
    assert client.get(f"/api/files/{other}", params={"token": token}).status_code == 403


def test_unknown_file_is_404(client, admin_headers):
    resp = client.get("/api/files/nope.pdf", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json() == {"error": "File not found"}


def test_no_public_uploads_mount(client):
    name = stored_name(client)
    assert client.get(f"/uploads/{name}").status_code == 404
