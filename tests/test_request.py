"""Request construction tests."""

import json

import pytest

from Library_Client import Cookie, KeyValue, build_delete_request, build_get_request, build_post_request

SESSION = Cookie("connect.sid", "s%3Aabc.def")


def lines_of(request: bytes):
    return request.decode("utf-8").split("\r\n")


def header_values(request: bytes, name: str):
    head = request.decode("utf-8").split("\r\n\r\n", 1)[0]
    prefix = f"{name}: "
    return [line[len(prefix):] for line in head.split("\r\n")[1:] if line.startswith(prefix)]


class TestGetRequest:

    def test_minimal_request(self):
        request = build_get_request("library.test", "/api/v1/tema/library/books")
        assert request == b"GET /api/v1/tema/library/books HTTP/1.1\r\nHost: library.test\r\n\r\n"

    def test_query_params_appended(self):
        request = build_get_request("library.test", "/search", query_params="q=dune&page=2")
        assert lines_of(request)[0] == "GET /search?q=dune&page=2 HTTP/1.1"

    @pytest.mark.parametrize("cookies,token", [
        ([], ""),
        ([SESSION], ""),
        ([], "jwt"),
        ([SESSION, Cookie("theme", "dark")], "jwt"),
    ])
    def test_header_policy(self, cookies, token):
        request = build_get_request("library.test", "/x", cookies=cookies, token=token)

        assert header_values(request, "Host") == ["library.test"]
        assert header_values(request, "Authorization") == ([f"Bearer {token}"] if token else [])
        expected_cookie = ["; ".join(f"{c.key}={c.value}" for c in cookies)] if cookies else []
        assert header_values(request, "Cookie") == expected_cookie
        assert request.endswith(b"\r\n\r\n")
        assert request.count(b"\r\n\r\n") == 1

    def test_multiple_cookies_single_header(self):
        request = build_get_request("h", "/", cookies=[SESSION, Cookie("a", "b")])
        assert "Cookie: connect.sid=s%3Aabc.def; a=b" in lines_of(request)


class TestDeleteRequest:

    def test_method_line_and_headers(self):
        request = build_delete_request("library.test", "/api/v1/tema/library/books/7", [SESSION], "jwt")
        assert lines_of(request) == [
            "DELETE /api/v1/tema/library/books/7 HTTP/1.1",
            "Host: library.test",
            "Authorization: Bearer jwt",
            "Cookie: connect.sid=s%3Aabc.def",
            "",
            "",
        ]

    def test_no_optional_headers(self):
        request = build_delete_request("h", "/books/1")
        assert request == b"DELETE /books/1 HTTP/1.1\r\nHost: h\r\n\r\n"


class TestPostRequest:

    BODY = [KeyValue("username", "ana"), KeyValue("password", "mere ţ")]

    def split(self, request: bytes):
        head, body = request.split(b"\r\n\r\n", 1)
        assert body.endswith(b"\r\n")
        return head.decode("utf-8"), body[:-2]

    def test_json_body_and_length(self):
        request = build_post_request("library.test", "/api/v1/tema/auth/login", "application/json", self.BODY)
        head, body = self.split(request)

        assert head.startswith("POST /api/v1/tema/auth/login HTTP/1.1\r\nHost: library.test")
        assert header_values(request, "Content-Type") == ["application/json"]
        assert header_values(request, "Content-Length") == [str(len(body))]
        assert json.loads(body) == {"username": "ana", "password": "mere ţ"}

    def test_json_length_counts_bytes_not_characters(self):
        request = build_post_request("h", "/", "application/json", [KeyValue("title", "ăîâşţ")])
        _, body = self.split(request)
        assert int(header_values(request, "Content-Length")[0]) == len(body)

    def test_form_body(self):
        body = [KeyValue("a", "1"), KeyValue("b", "two"), KeyValue("c", "")]
        request = build_post_request("h", "/form", "application/x-www-form-urlencoded", body)
        _, raw_body = self.split(request)

        assert raw_body == b"a=1&b=two&c="
        assert header_values(request, "Content-Length") == ["12"]

    def test_auth_headers_forwarded(self):
        request = build_post_request("h", "/books", "application/json", self.BODY, [SESSION], "jwt")
        assert header_values(request, "Authorization") == ["Bearer jwt"]
        assert header_values(request, "Cookie") == ["connect.sid=s%3Aabc.def"]

    def test_empty_lists_omit_headers(self):
        request = build_post_request("h", "/books", "application/json", [])
        assert header_values(request, "Authorization") == []
        assert header_values(request, "Cookie") == []
        _, body = self.split(request)
        assert body == b"{}"

    def test_unsupported_content_type(self):
        with pytest.raises(ValueError):
            build_post_request("h", "/", "text/plain", self.BODY)


class TestCookie:

    def test_default_is_null(self):
        assert Cookie().is_null
        assert not SESSION.is_null

    def test_str(self):
        assert str(SESSION) == "connect.sid=s%3Aabc.def"
