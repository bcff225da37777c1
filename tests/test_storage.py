import pytest

from zelene.services.storage import LocalStorage, S3Storage, StorageError, folder_for_mime, make_key, storage_from_config


@pytest.mark.parametrize("content_type,folder", [
    ("image/jpeg", "images"),
    ("IMAGE/PNG", "images"),
    ("application/pdf", "pdfs"),
    ("text/csv", "texts"),
    ("application/zip", "others"),
])
def test_folder_for_mime(content_type, folder):
    assert folder_for_mime(content_type) == folder


def test_make_key_uses_only_extension_of_client_name():
    key = make_key("../../etc/passwd.JPG", "image/jpeg")
    folder, name = key.split("/")
    assert folder == "images"
    assert name.endswith(".jpg")
    assert "passwd" not in key
    assert make_key("noext", "application/pdf").endswith(".unknown")


def test_local_storage_round_trip_and_escape(tmp_path):
    store = LocalStorage(root=tmp_path)
    store.put_bytes("pdfs/a.pdf", b"%PDF")
    assert store.exists("pdfs/a.pdf")
    with store.open("pdfs/a.pdf") as fh:
        assert fh.read() == b"%PDF"

    with pytest.raises(StorageError):
        store.put_bytes("../outside.txt", b"x")
    assert not store.exists("../../etc/passwd")


def test_local_storage_delete_is_idempotent(tmp_path):
    store = LocalStorage(root=tmp_path)
    store.put_bytes("images/a.jpg", b"x")

    store.delete("images/a.jpg")
    store.delete("images/a.jpg")

    assert not store.exists("images/a.jpg")
    with pytest.raises(StorageError):
        store.delete("../outside.txt")


def test_storage_from_config():
    assert isinstance(storage_from_config({"STORAGE_BACKEND": "local", "STORAGE_LOCAL_ROOT": "/tmp/x"}), LocalStorage)
    s3 = storage_from_config({"STORAGE_BACKEND": "S3", "S3_BUCKET": "attachments", "S3_REGION": "eu-west-1"})
    assert isinstance(s3, S3Storage)
    assert s3.bucket == "attachments"
    with pytest.raises(StorageError):
        storage_from_config({"STORAGE_BACKEND": "s3"})


def test_attachment_download_is_admin_only(app, client, make_user, login):
    store = app.extensions["zelene.attachments"]
    store.put_bytes("images/seen.png", b"\x89PNG")

    assert client.get("/attachments/images/seen.png").status_code == 401

    login(make_user(role="ADMIN"))
    resp = client.get("/attachments/images/seen.png")
    assert resp.status_code == 200
    assert resp.data == b"\x89PNG"
    assert resp.mimetype == "image/png"
    assert client.get("/attachments/images/missing.png").status_code == 404
