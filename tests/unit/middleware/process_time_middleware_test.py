"""Unit tests for the ProcessTimeMiddleware class."""

from unittest.mock import AsyncMock, Mock, patch

import pytest
from fastapi import Request, Response

from sufra.middleware.process_time_middleware import ProcessTimeMiddleware


class TestProcessTimeMiddleware:
    """Unit tests for ProcessTimeMiddleware."""

    @pytest.fixture
    def middleware(self) -> ProcessTimeMiddleware:
        # Mock app is required by BaseHTTPMiddleware
        return ProcessTimeMiddleware(Mock())

    @pytest.fixture
    def request_(self) -> Request:
        scope = {
            "type": "http",
            "method": "GET",
            "path": "/api/v1/recipes",
            "headers": [],
            "query_string": b"",
        }
        return Request(scope)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_dispatch_adds_process_time_header(
        self, middleware: ProcessTimeMiddleware, request_: Request
    ) -> None:
        """Test that dispatch adds a numeric X-Process-Time header."""
        # Arrange
        call_next = AsyncMock(return_value=Response(content="ok", status_code=200))

        # Act
        with patch("sufra.middleware.process_time_middleware._log") as mock_logger:
            result = await middleware.dispatch(request_, call_next)

        # Assert
        call_next.assert_called_once_with(request_)
        assert float(result.headers["X-Process-Time"]) >= 0
        mock_logger.info.assert_called_once()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_slow_requests_are_logged_as_warnings(
        self, middleware: ProcessTimeMiddleware, request_: Request
    ) -> None:
        """Test that requests over the slow threshold log at warning level."""
        # Arrange
        call_next = AsyncMock(return_value=Response(status_code=204))

        # Act
        with (
            patch("sufra.middleware.process_time_middleware._log") as mock_logger,
            patch(
                "sufra.middleware.process_time_middleware.time.perf_counter",
                side_effect=[10.0, 13.5],
            ),
        ):
            result = await middleware.dispatch(request_, call_next)

        # Assert
        assert result.headers["X-Process-Time"] == "3.500000"
        mock_logger.warning.assert_called_once()
        mock_logger.info.assert_not_called()
