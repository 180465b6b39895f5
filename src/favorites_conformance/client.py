"""HTTP client for the favorites service.

The client owns a single ``httpx.Client`` and therefore a single cookie
jar. Create one client per scenario so that no connection or cookie state
leaks between scenarios that may run concurrently.

Session credentials are never attached implicitly: after the token
endpoint sets its cookie, the jar is cleared and the caller passes the
returned ``SessionCredential`` to ``submit_spot`` explicitly.

Usage::

    with FavoritesClient(ConformanceConfig()) as client:
        credential = client.acquire_session()
        response = client.submit_spot(
            FavoriteSpotRequest(title="Favorite Spot", lat=24.24, lon=90.0),
            credential,
        )

For tests, pass an ``httpx.Client`` (for example a FastAPI ``TestClient``)
directly. The wrapper leaves closing it to the caller unless
``close_http`` hands it over::

    client = FavoritesClient(config, http=TestClient(app), close_http=True)
"""

import time
from datetime import UTC, datetime
from types import TracebackType
from typing import Any

import httpx

from favorites_conformance.config import ConformanceConfig
from favorites_conformance.exceptions import SessionAcquisitionError, TransportFailure
from favorites_conformance.models import FavoriteSpotRequest, SessionCredential
from favorites_conformance.observability.logging import get_logger
from favorites_conformance.observability.metrics import record_request

logger = get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"


class FavoritesClient:
    """Thin wrapper over ``httpx.Client`` speaking the favorites API.

    Attributes:
        config: Conformance configuration.
    """

    def __init__(
        self,
        config: ConformanceConfig,
        http: httpx.Client | None = None,
        close_http: bool = False,
    ) -> None:
        self.config = config
        self._owns_http = http is None or close_http
        self._http = http or httpx.Client(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
        )

    def __enter__(self) -> "FavoritesClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def _send(self, endpoint: str, path: str, **kwargs: Any) -> httpx.Response:
        """POST to ``path``, recording metrics and wrapping transport errors."""
        started = time.perf_counter()
        try:
            response = self._http.post(path, **kwargs)
        except httpx.TransportError as e:
            duration = time.perf_counter() - started
            record_request(endpoint, None, duration)
            logger.error(
                "http.transport_error",
                endpoint=endpoint,
                path=path,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TransportFailure(message=f"POST {path} failed: {e}", cause=e) from e

        duration = time.perf_counter() - started
        record_request(endpoint, response.status_code, duration)
        logger.info(
            "http.request",
            endpoint=endpoint,
            path=path,
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )
        return response

    def acquire_session(self) -> SessionCredential:
        """Obtain a fresh session credential from the token endpoint.

        Returns:
            The first cookie the token endpoint sets.

        Raises:
            SessionAcquisitionError: If the endpoint answers with a non-2xx
                status or sets no cookie.
            TransportFailure: If the request could not be completed.
        """
        response = self._send("tokens", self.config.tokens_path)
        if not response.is_success:
            logger.error(
                "session.rejected",
                status_code=response.status_code,
                body=response.text,
            )
            raise SessionAcquisitionError(
                message=(
                    f"Token endpoint returned {response.status_code}: {response.text}"
                ),
                status_code=response.status_code,
                body=response.text,
            )

        cookies = list(response.cookies.jar)
        # The credential is attached explicitly, never through the jar.
        self._http.cookies.clear()
        if not cookies:
            raise SessionAcquisitionError(
                message="Token endpoint succeeded but set no cookie",
                status_code=response.status_code,
                body=response.text,
            )

        cookie = cookies[0]
        credential = SessionCredential(
            name=cookie.name,
            value=cookie.value or "",
            acquired_at=datetime.now(UTC),
        )
        logger.info("session.acquired", cookie_name=credential.name)
        return credential

    def submit_spot(
        self,
        request: FavoriteSpotRequest,
        credential: SessionCredential | None = None,
        raw: bool = False,
    ) -> httpx.Response:
        """Send a spot creation request.

        Args:
            request: Fields to send.
            credential: Session credential to attach as a ``Cookie`` header.
                No credential is attached when None.
            raw: Send the field values unescaped (see
                ``FavoriteSpotRequest.encode``).

        Returns:
            The service's response, whatever its status.

        Raises:
            TransportFailure: If the request could not be completed.
        """
        headers = {"Content-Type": FORM_CONTENT_TYPE}
        if credential is not None:
            headers["Cookie"] = credential.cookie_header
        return self._send(
            "favorites",
            self.config.favorites_path,
            content=request.encode(raw=raw).encode("utf-8"),
            headers=headers,
        )
