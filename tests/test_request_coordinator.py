"""
Tests cho RequestCoordinator.

Verify read-through protocol:
1. Miss doc disk va populate cache, hit khong cham disk
2. Non-GET -> 405, khong truy cap cache/filesystem
3. File thieu / thu muc / ngoai root -> 404, khong cache
4. '/' tuong duong '/index.html'
5. handle_connection() qua socketpair
"""

import socket
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, Mock

import pytest

from core.http_protocol import HttpRequest, build_error_response
from core.mime_types import guess_content_type
from services.cache_store import FileCacheStore
from services.request_coordinator import RequestCoordinator


def split_response(response: bytes):
    head, body = response.split(b"\r\n\r\n", 1)
    lines = head.decode("latin-1").split("\r\n")
    headers = dict(line.split(": ", 1) for line in lines[1:])
    return lines[0], headers, body


@pytest.fixture
def site(tmp_path):
    root = (tmp_path / "site").resolve()
    root.mkdir()
    (root / "index.html").write_bytes(b"hello world")
    (root / "css").mkdir()
    (root / "css" / "site.css").write_bytes(b"body{}")
    (root / "blob.unknownext123").write_bytes(b"\x00\x01\x02")
    return root


@pytest.fixture
def coordinator(site):
    return RequestCoordinator(root=site, cache=FileCacheStore())


class TestRespond:
    def test_miss_reads_disk_and_populates_cache(self, coordinator):
        response = coordinator.respond(HttpRequest("GET", "/index.html", "HTTP/1.1"))

        status, headers, body = split_response(response)
        assert status == "HTTP/1.1 200 OK"
        assert headers["Content-Length"] == "11"
        assert headers["Content-Type"] == "text/html"
        assert body == b"hello world"

        entry = coordinator.cache.lookup("/index.html")
        assert entry.content == b"hello world"
        assert entry.content_type == "text/html"

    def test_hit_is_served_from_cache(self, coordinator, site):
        first = coordinator.respond(HttpRequest("GET", "/index.html"))
        # Thay doi disk ma khong invalidate -> response van la ban cache
        (site / "index.html").write_bytes(b"changed!!!!")
        second = coordinator.respond(HttpRequest("GET", "/index.html"))

        assert first == second
        assert coordinator.cache.get_stats()["hits"] == 1

    def test_every_request_looks_up_cache_first(self, site):
        cache = Mock(wraps=FileCacheStore())
        coordinator = RequestCoordinator(root=site, cache=cache)

        for _ in range(3):
            coordinator.respond(HttpRequest("GET", "/css/site.css"))

        assert cache.lookup.call_count == 3
        assert cache.insert.call_count == 1

    def test_invalidated_entry_is_reread(self, coordinator, site):
        coordinator.respond(HttpRequest("GET", "/index.html"))
        (site / "index.html").write_bytes(b"goodbye!!!!")
        coordinator.cache.invalidate("/index.html")

        _, _, body = split_response(coordinator.respond(HttpRequest("GET", "/index.html")))
        assert body == b"goodbye!!!!"

    def test_root_maps_to_index(self, coordinator):
        root_response = coordinator.respond(HttpRequest("GET", "/"))
        index_response = coordinator.respond(HttpRequest("GET", "/index.html"))

        assert root_response == index_response
        assert coordinator.cache.size() == 1
        assert "/index.html" in coordinator.cache
        assert "/" not in coordinator.cache

    def test_custom_default_document(self, site):
        (site / "home.html").write_bytes(b"home")
        coordinator = RequestCoordinator(
            root=site, cache=FileCacheStore(), default_document="home.html"
        )

        _, _, body = split_response(coordinator.respond(HttpRequest("GET", "/")))
        assert body == b"home"

    @pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "HEAD", "get", ""])
    def test_non_get_is_rejected_without_side_effects(self, site, method):
        cache = Mock()
        classifier = Mock()
        coordinator = RequestCoordinator(root=site, cache=cache, classifier=classifier)

        response = coordinator.respond(HttpRequest(method, "/index.html"))

        assert response == build_error_response(405)
        assert cache.method_calls == []
        classifier.assert_not_called()

    def test_missing_file_is_404_and_not_cached(self, coordinator):
        response = coordinator.respond(HttpRequest("GET", "/missing.css"))

        status, headers, body = split_response(response)
        assert status == "HTTP/1.1 404 Not Found"
        assert headers["Content-Type"] == "text/html"
        assert body == b"<h1>404 Not Found</h1>"
        assert coordinator.cache.size() == 0

    def test_directory_is_404(self, coordinator):
        response = coordinator.respond(HttpRequest("GET", "/css"))
        assert response == build_error_response(404)
        assert coordinator.cache.size() == 0

    def test_path_outside_root_is_404(self, coordinator, site):
        (site.parent / "secret.html").write_bytes(b"secret")
        try:
            response = coordinator.respond(HttpRequest("GET", "/../secret.html"))
        finally:
            (site.parent / "secret.html").unlink()
        assert response == build_error_response(404)

    @pytest.mark.parametrize(
        "target",
        ["/./index.html", "/css/../index.html", "//index.html", "index.html"],
    )
    def test_non_canonical_alias_is_404_and_not_cached(self, coordinator, target):
        # Watcher chi invalidate '/index.html', alias cache vao se stale mai mai
        response = coordinator.respond(HttpRequest("GET", target))

        assert response == build_error_response(404)
        assert coordinator.cache.size() == 0

    def test_symlink_alias_is_404(self, coordinator, site):
        link = site / "alias.html"
        try:
            link.symlink_to(site / "index.html")
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        response = coordinator.respond(HttpRequest("GET", "/alias.html"))

        assert response == build_error_response(404)
        assert "/alias.html" not in coordinator.cache

    def test_canonical_nested_key_still_served(self, coordinator):
        _, _, body = split_response(coordinator.respond(HttpRequest("GET", "/css/site.css")))

        assert body == b"body{}"
        assert "/css/site.css" in coordinator.cache

    def test_unknown_type_omits_content_type(self, coordinator):
        _, headers, body = split_response(
            coordinator.respond(HttpRequest("GET", "/blob.unknownext123"))
        )
        assert "Content-Type" not in headers
        assert body == b"\x00\x01\x02"

    def test_classifier_is_used_on_miss_only(self, site):
        classifier = Mock(side_effect=guess_content_type)
        coordinator = RequestCoordinator(
            root=site, cache=FileCacheStore(), classifier=classifier
        )

        coordinator.respond(HttpRequest("GET", "/index.html"))
        coordinator.respond(HttpRequest("GET", "/index.html"))

        classifier.assert_called_once()

    def test_concurrent_first_requests(self, coordinator):
        """Nhieu miss cung luc: deu tra ve dung noi dung, cache co 1 entry."""
        with ThreadPoolExecutor(max_workers=8) as executor:
            responses = list(
                executor.map(
                    lambda _: coordinator.respond(HttpRequest("GET", "/index.html")),
                    range(32),
                )
            )

        assert len(set(responses)) == 1
        assert coordinator.cache.size() == 1


class TestHandleConnection:
    def test_full_exchange_over_socket(self, coordinator):
        client, server = socket.socketpair()
        try:
            client.sendall(b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n")
            coordinator.handle_connection(server)

            chunks = []
            while True:
                chunk = client.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
        finally:
            client.close()

        status, _, body = split_response(b"".join(chunks))
        assert status == "HTTP/1.1 200 OK"
        assert body == b"hello world"

    def test_client_closing_early_is_silent(self, coordinator):
        client, server = socket.socketpair()
        client.close()

        # Khong raise, khong cache gi
        coordinator.handle_connection(server)
        assert coordinator.cache.size() == 0

    def test_broken_pipe_is_swallowed(self, coordinator):
        conn = MagicMock()
        conn.__enter__.return_value = conn
        conn.__exit__.return_value = False
        conn.recv.side_effect = [b"GET / HTTP/1.1\r\n\r\n"]
        conn.sendall.side_effect = BrokenPipeError()

        coordinator.handle_connection(conn)

        conn.sendall.assert_called_once()
