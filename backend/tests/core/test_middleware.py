"""
Tests for RequestContextMiddleware.
"""

from unittest.mock import MagicMock

from django.http import HttpResponse
from django.test import RequestFactory
from structlog.contextvars import get_contextvars

from apps.core.middleware import REQUEST_ID_HEADER, RequestContextMiddleware


class TestRequestContextMiddleware:
    """Tests for per-request logging context."""

    def test_uses_incoming_request_id(self) -> None:
        """Should echo the caller's X-Request-ID on the response."""
        middleware = RequestContextMiddleware(MagicMock(return_value=HttpResponse()))
        request = RequestFactory().get("/api/v1/health", HTTP_X_REQUEST_ID="req-123")

        response = middleware(request)

        assert response[REQUEST_ID_HEADER] == "req-123"

    def test_generates_request_id_when_missing(self) -> None:
        """Should generate a request id when none is sent."""
        middleware = RequestContextMiddleware(MagicMock(return_value=HttpResponse()))
        request = RequestFactory().get("/api/v1/health")

        response = middleware(request)

        assert len(response[REQUEST_ID_HEADER]) == 36

    def test_context_bound_during_request(self) -> None:
        """Should bind trace and http fields while the view runs."""
        seen: dict = {}

        def view(request):
            seen.update(get_contextvars())
            return HttpResponse()

        middleware = RequestContextMiddleware(view)
        middleware(RequestFactory().post("/webhooks/stripe/", HTTP_X_REQUEST_ID="abc"))

        assert seen["correlation_id"] == "abc"
        assert seen["http.method"] == "POST"
        assert seen["http.url_details.path"] == "/webhooks/stripe/"

    def test_context_cleared_after_request(self) -> None:
        """Should not leak context into the next request."""
        middleware = RequestContextMiddleware(MagicMock(return_value=HttpResponse()))

        middleware(RequestFactory().get("/"))

        assert get_contextvars() == {}

    def test_context_cleared_when_view_raises(self) -> None:
        """Should clear context even if the view fails."""
        middleware = RequestContextMiddleware(MagicMock(side_effect=RuntimeError("boom")))

        try:
            middleware(RequestFactory().get("/"))
        except RuntimeError:
            pass

        assert get_contextvars() == {}
