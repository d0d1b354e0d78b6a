"""Tests for the file API endpoints using the FastAPI TestClient."""

import os

import pytest

from server.routes import file_routes


def multipart_body(parts, boundary="filehostboundary"):
    """
    Build a raw multipart/form-data body.

    Args:
        parts: List of (field_name, filename_or_None, content_bytes)

    Returns:
        Tuple of (body, content_type)
    """
    chunks = []
    for field, filename, content in parts:
        disposition = f'form-data; name="{field}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        chunks.append(
            f"--{boundary}\r\nContent-Disposition: {disposition}\r\n\r\n".encode() + content + b"\r\n"
        )
    chunks.append(f"--{boundary}--\r\n".encode())
    return b"".join(chunks), f"multipart/form-data; boundary={boundary}"


def upload(api, name, content):
    return api.post("/api/files", files={"file": (name, content, "application/octet-stream")})


class TestListEndpoint:
    """Tests for GET /api/files/list."""

    def test_empty_store(self, api):
        response = api.get("/api/files/list")

        assert response.status_code == 200
        assert response.json() == {"files": []}

    def test_lists_uploaded_files(self, api):
        upload(api, "a.txt", b"hello")
        upload(api, "b.bin", b"\x00\x01\x02")

        response = api.get("/api/files/list")

        assert response.status_code == 200
        files = {f["name"]: f for f in response.json()["files"]}
        assert set(files) == {"a.txt", "b.bin"}
        assert files["a.txt"]["size"] == 5
        assert files["b.bin"]["size"] == 3
        assert set(files["a.txt"]) == {"name", "size", "creationDate", "lastModifiedDate"}

    def test_missing_store_directory_lists_nothing(self, api, store_dir):
        store_dir.rmdir()

        response = api.get("/api/files/list")

        assert response.status_code == 200
        assert response.json() == {"files": []}

    def test_read_failure(self, api, monkeypatch):
        def broken_scandir(path):
            raise PermissionError("denied")

        monkeypatch.setattr("server.storage.os.scandir", broken_scandir)

        response = api.get("/api/files/list")

        assert response.status_code == 500
        assert response.json()["code"] == "STORE_READ_FAILED"


class TestUploadEndpoint:
    """Tests for POST /api/files."""

    def test_upload_single_file(self, api, store_dir):
        response = upload(api, "a.txt", b"hello world")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "File saved successfully!"
        assert data["file"]["name"] == "a.txt"
        assert data["file"]["size"] == 11
        assert data["file"]["path"].endswith("a.txt")
        assert "lastModifiedDate" in data["file"]
        assert data["files"] == [data["file"]]
        assert (store_dir / "a.txt").read_bytes() == b"hello world"

    def test_repeated_uploads_get_suffixes(self, api, store_dir):
        names = [upload(api, "a.txt", str(i).encode()).json()["file"]["name"] for i in range(3)]

        assert names == ["a.txt", "a(1).txt", "a(2).txt"]
        assert (store_dir / "a.txt").read_bytes() == b"0"
        assert (store_dir / "a(2).txt").read_bytes() == b"2"

    def test_symlinked_name_gets_suffix(self, api, store_dir, tmp_path):
        (store_dir / "a.txt").symlink_to(tmp_path / "outside.txt")

        response = upload(api, "a.txt", b"x")

        assert response.status_code == 200
        assert response.json()["file"]["name"] == "a(1).txt"

    def test_multiple_parts_in_one_request(self, api, store_dir):
        response = api.post(
            "/api/files",
            files=[
                ("file", ("one.txt", b"1", "text/plain")),
                ("file", ("two.txt", b"22", "text/plain")),
            ],
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "2 files saved successfully!"
        assert [f["name"] for f in data["files"]] == ["one.txt", "two.txt"]
        assert data["file"]["name"] == "one.txt"
        assert (store_dir / "two.txt").read_bytes() == b"22"

    def test_no_body(self, api):
        response = api.post("/api/files")

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_FILE"

    def test_field_without_file(self, api, store_dir):
        response = api.post("/api/files", data={"file": "just text"})

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_FILE"
        assert list(store_dir.iterdir()) == []

    def test_wrong_field_name(self, api, store_dir):
        response = api.post("/api/files", files={"upload": ("a.txt", b"x")})

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_FILE"
        assert list(store_dir.iterdir()) == []

    def test_part_without_name(self, api, store_dir):
        body, content_type = multipart_body([("file", "", b"content")])

        response = api.post("/api/files", content=body, headers={"Content-Type": content_type})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_NAME"
        assert list(store_dir.iterdir()) == []

    def test_client_directories_are_dropped(self, api, store_dir, tmp_path):
        body, content_type = multipart_body([("file", "../../escape.txt", b"x")])

        response = api.post("/api/files", content=body, headers={"Content-Type": content_type})

        assert response.status_code == 200
        assert response.json()["file"]["name"] == "escape.txt"
        assert (store_dir / "escape.txt").exists()
        assert not (tmp_path / "escape.txt").exists()

    def test_write_failure(self, api, monkeypatch):
        def broken_write(path, stream):
            raise OSError("disk full")

        monkeypatch.setattr("server.storage.write_new_file", broken_write)

        response = upload(api, "a.txt", b"x")

        assert response.status_code == 500
        assert response.json() == {"detail": "Error saving file", "code": "STORE_WRITE_FAILED"}


class TestDownloadEndpoint:
    """Tests for GET /api/files/{name}/download."""

    def test_file_is_opened_off_the_event_loop(self, api, monkeypatch):
        offloaded = []
        real_run_in_threadpool = file_routes.run_in_threadpool

        async def recording_run_in_threadpool(func, *args, **kwargs):
            offloaded.append(getattr(func, "__name__", func))
            return await real_run_in_threadpool(func, *args, **kwargs)

        upload(api, "a.txt", b"abc")
        monkeypatch.setattr(file_routes, "run_in_threadpool", recording_run_in_threadpool)

        response = api.get("/api/files/a.txt/download")

        assert response.status_code == 200
        assert "open_download" in offloaded

    def test_download_is_byte_identical(self, api):
        content = os.urandom(300_000)
        upload(api, "blob.bin", content)

        response = api.get("/api/files/blob.bin/download")

        assert response.status_code == 200
        assert response.content == content
        assert response.headers["content-type"] == "application/octet-stream"
        assert response.headers["content-length"] == str(len(content))
        assert response.headers["content-disposition"] == 'attachment; filename="blob.bin"'

    def test_download_empty_file(self, api):
        upload(api, "empty.txt", b"")

        response = api.get("/api/files/empty.txt/download")

        assert response.status_code == 200
        assert response.content == b""

    def test_name_with_spaces(self, api):
        upload(api, "my report.txt", b"data")

        response = api.get("/api/files/my%20report.txt/download")

        assert response.status_code == 200
        assert response.content == b"data"

    def test_non_ascii_name(self, api):
        upload(api, "résumé.pdf", b"cv")

        response = api.get("/api/files/r%C3%A9sum%C3%A9.pdf/download")

        assert response.status_code == 200
        assert "filename*=UTF-8''r%C3%A9sum%C3%A9.pdf" in response.headers["content-disposition"]

    def test_missing_file(self, api):
        response = api.get("/api/files/nope.txt/download")

        assert response.status_code == 404
        assert response.json() == {"detail": "File not found", "code": "NOT_FOUND"}

    @pytest.mark.parametrize("encoded", ["..", "..%5Csecret.txt", "a%5Cb.txt"])
    def test_traversal_rejected(self, api, encoded):
        response = api.get(f"/api/files/{encoded}/download")

        assert response.status_code in (400, 404)
        if response.status_code == 400:
            assert response.json()["code"] == "INVALID_REQUEST"

    def test_backslash_name_is_invalid(self, api):
        response = api.get("/api/files/..%5Csecret.txt/download")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REQUEST"


class TestDeleteEndpoint:
    """Tests for DELETE /api/files/{name}/delete."""

    def test_delete_removes_file(self, api, store_dir):
        upload(api, "a.txt", b"x")

        response = api.delete("/api/files/a.txt/delete")

        assert response.status_code == 200
        assert response.json() == {"message": "File deleted successfully!"}
        assert not (store_dir / "a.txt").exists()
        assert api.get("/api/files/list").json() == {"files": []}

    def test_delete_missing(self, api):
        response = api.delete("/api/files/a.txt/delete")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_delete_twice(self, api):
        upload(api, "a.txt", b"x")

        assert api.delete("/api/files/a.txt/delete").status_code == 200
        assert api.delete("/api/files/a.txt/delete").status_code == 404

    def test_delete_traversal_keeps_outside_file(self, api, tmp_path):
        victim = tmp_path / "victim.txt"
        victim.write_text("keep me")

        response = api.delete("/api/files/..%5Cvictim.txt/delete")

        assert response.status_code == 400
        assert victim.exists()


class TestRenameEndpoint:
    """Tests for PUT /api/files/{name}/rename."""

    def test_rename_keeps_extension(self, api, store_dir):
        upload(api, "report.pdf", b"pdf")

        response = api.put("/api/files/report.pdf/rename", content=b"final")

        assert response.status_code == 200
        assert response.json() == {"message": "File renamed successfully!", "newName": "final.pdf"}
        assert (store_dir / "final.pdf").read_bytes() == b"pdf"
        assert not (store_dir / "report.pdf").exists()

    def test_body_whitespace_is_stripped(self, api):
        upload(api, "report.pdf", b"pdf")

        response = api.put("/api/files/report.pdf/rename", content=b"  final\n")

        assert response.json()["newName"] == "final.pdf"

    def test_rename_conflict(self, api, store_dir):
        upload(api, "a.txt", b"a")
        upload(api, "b.txt", b"b")

        response = api.put("/api/files/a.txt/rename", content=b"b")

        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"
        assert (store_dir / "a.txt").read_bytes() == b"a"
        assert (store_dir / "b.txt").read_bytes() == b"b"

    def test_rename_missing_file(self, api):
        response = api.put("/api/files/nope.txt/rename", content=b"other")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    @pytest.mark.parametrize("body", [b"", b"   ", b"../escape", b"sub/name", b"\xff\xfe"])
    def test_rename_invalid_body(self, api, store_dir, body):
        upload(api, "a.txt", b"a")

        response = api.put("/api/files/a.txt/rename", content=body)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REQUEST"
        assert (store_dir / "a.txt").exists()

    def test_rename_then_list(self, api):
        upload(api, "notes.txt", b"n")
        api.put("/api/files/notes.txt/rename", content=b"todo")

        names = [f["name"] for f in api.get("/api/files/list").json()["files"]]

        assert names == ["todo.txt"]


class TestServiceEndpoints:
    """Tests for health, readiness and request tracing."""

    def test_health(self, api):
        response = api.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "filehost"}

    def test_ready(self, api):
        response = api.get("/ready")

        assert response.status_code == 200
        assert response.json() == {"ready": True, "store": "ok"}

    def test_not_ready_when_store_unusable(self, api, store_dir, monkeypatch):
        blocker = store_dir / "blocker"
        blocker.write_text("not a directory")
        monkeypatch.setattr("server.config.STORE_DIR", str(blocker))

        response = api.get("/ready")

        assert response.status_code == 503
        assert response.json() == {"ready": False, "store": "unavailable"}

    def test_request_id_header(self, api):
        response = api.get("/api/files/list")

        assert "x-request-id" in response.headers
        assert len(response.headers["x-request-id"]) == 36

    def test_error_responses_carry_request_id(self, api):
        response = api.get("/api/files/nope.txt/download")

        assert response.status_code == 404
        assert "x-request-id" in response.headers

    def test_openapi_documents_error_shape(self, api):
        schema = api.get("/openapi.json").json()

        assert "ErrorResponse" in schema["components"]["schemas"]
        assert "/api/files/{name}/rename" in schema["paths"]
