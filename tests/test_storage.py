import io
from datetime import timedelta

import pytest
from fastapi import UploadFile

from jobboard.errors import StorageError
from jobboard.storage import AssetStorage, UploadedFile, validate_cv_file


def test_put_and_delete(storage):
    reference = storage.put(b"content", "cvs/3", "pdf")

    assert reference.startswith("cvs/3/") and reference.endswith(".pdf")
    assert storage.path_for(reference).read_bytes() == b"content"

    storage.delete(reference)
    assert not storage.path_for(reference).exists()


def test_deleting_a_missing_file_is_not_an_error(storage):
    storage.delete("cvs/never-stored.pdf")


def test_references_cannot_escape_the_root(storage):
    with pytest.raises(StorageError):
        storage.path_for("../../etc/passwd")


def test_os_failures_surface_as_storage_errors(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file where a directory should be")
    storage = AssetStorage(blocker, signing_key="k")

    with pytest.raises(StorageError):
        storage.put(b"x", "cvs", "pdf")


def test_download_tokens(storage):
    url = storage.presigned_download_url("cvs/1/a.pdf", timedelta(minutes=5))
    token = url.rsplit("/", 1)[1]

    assert storage.resolve_download_token(token) == "cvs/1/a.pdf"

    expired = storage.presigned_download_url("cvs/1/a.pdf", timedelta(seconds=-10)).rsplit("/", 1)[1]
    assert storage.resolve_download_token(expired) is None

    other_key = AssetStorage(storage.root, signing_key="someone-else")
    assert other_key.resolve_download_token(token) is None


def test_cv_file_validation():
    assert validate_cv_file(UploadedFile("resume.PDF", b"%PDF"), "cv") == []
    assert validate_cv_file(UploadedFile("resume.docx", b"data"), "cv") == []

    wrong_type = validate_cv_file(UploadedFile("resume.txt", b"data"), "cv")
    assert wrong_type == ["The cv must be a file of type: doc, docx, pdf."]

    empty = validate_cv_file(UploadedFile("resume.pdf", b""), "file")
    assert empty == ["The file must not be empty."]

    too_big = validate_cv_file(UploadedFile("resume.pdf", b"x" * 2049), "cv", max_size_kb=2)
    assert too_big == ["The cv must not be greater than 2 kilobytes."]


def test_reading_an_upload_stops_past_the_size_limit():
    upload = UploadFile(file=io.BytesIO(b"x" * 10_000), filename="huge.pdf")

    read = UploadedFile.from_upload(upload, max_size_kb=1)

    assert len(read.content) == 1025
    assert validate_cv_file(read, "cv", max_size_kb=1) == ["The cv must not be greater than 1 kilobytes."]


def test_an_empty_file_field_is_no_upload():
    assert UploadedFile.from_upload(None) is None
    assert UploadedFile.from_upload(UploadFile(file=io.BytesIO(b""), filename="")) is None
