"""Tests for wren.http response types and request headers."""

from pathlib import Path

from wren.http import FileResponse, Headers, Response, redirect


class TestResponse:
    def test_with_header_returns_new(self) -> None:
        original = Response("ok")
        changed = original.with_header("X-A", "1")
        assert original.headers == ()
        assert changed.header("x-a") == "1"

    def test_body_conversions(self) -> None:
        assert Response("héllo").body_bytes == "héllo".encode()
        assert Response(b"raw").text == "raw"

    def test_redirect_status(self) -> None:
        assert redirect("/x", 301).status == 301

    def test_redirect(self) -> None:
        response = redirect("/about")
        assert response.status == 302
        assert response.header("Location") == "/about"


class TestFileResponse:
    def test_chain(self) -> None:
        response = (
            FileResponse(path=Path("a.txt"))
            .with_header("Content-Type", "text/plain")
            .with_header("X-A", "1")
            .without_header("content-type")
        )
        assert response.headers == (("X-A", "1"),)
        assert response.status == 200


class TestHeaders:
    def test_case_insensitive_lookup(self) -> None:
        headers = Headers(((b"Content-Type", b"text/plain"),))
        assert headers["content-type"] == "text/plain"
        assert "CONTENT-TYPE" in headers
        assert headers.get("missing") is None

    def test_duplicates(self) -> None:
        headers = Headers(((b"accept", b"a"), (b"Accept", b"b")))
        assert len(headers) == 1
        assert headers.pairs == (("accept", "a"), ("accept", "b"))
        assert headers.without(["ACCEPT"]) == []
