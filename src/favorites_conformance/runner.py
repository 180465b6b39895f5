"""Execute request/assert scenarios against the favorites service.

A ``Scenario`` describes one request and the outcome the service must
produce. ``ScenarioRunner.run`` acquires a credential as the scenario asks,
sends the request, and checks the response, raising a
``ConformanceError`` subclass on the first mismatch. Every scenario gets
its own ``FavoritesClient``, so scenarios never share a cookie jar or a
connection.

Usage::

    runner = ScenarioRunner(ConformanceConfig())
    result = runner.run(
        Scenario(
            name="valid-spot",
            request=FavoriteSpotRequest(title="Favorite Spot", lat=24.24, lon=90.0),
            expected_status=200,
        )
    )
    result.spot.id
"""

import time
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from favorites_conformance.client import FavoritesClient
from favorites_conformance.config import ConformanceConfig
from favorites_conformance.exceptions import (
    ConformanceError,
    ExpectationError,
    ResponseShapeError,
    UnexpectedStatusError,
)
from favorites_conformance.models import (
    CredentialMode,
    FavoriteSpotRequest,
    FavoriteSpotResponse,
    SessionCredential,
    SpotColor,
)
from favorites_conformance.observability.logging import get_logger, scenario_context
from favorites_conformance.observability.metrics import record_scenario

logger = get_logger(__name__)

ClientFactory = Callable[[ConformanceConfig], FavoritesClient]


class Scenario(BaseModel):
    """One request and the outcome the service must produce.

    Attributes:
        name: Unique, human-readable identifier.
        request: Fields to send.
        credential: How the request is authenticated.
        expected_status: Status the service must return.
        expect_echo: On success, require title/lat/lon to be echoed.
        expected_color: On success, the color the body must carry. None
            requires the color to be null.
        raw_encoding: Send field values unescaped.
        known_issue: Note on a documented service defect or transport
            artifact that makes this scenario fail against the live service.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    request: FavoriteSpotRequest
    credential: CredentialMode = CredentialMode.FRESH
    expected_status: int = Field(..., ge=100, le=599)
    expect_echo: bool = True
    expected_color: SpotColor | None = None
    raw_encoding: bool = False
    known_issue: str | None = None


class ScenarioResult(BaseModel):
    """What the service returned for a scenario that passed.

    Attributes:
        scenario: Scenario name.
        status_code: Observed status.
        body: Raw response body.
        spot: Parsed body on success, None otherwise.
        duration_ms: Wall time of the whole scenario, waits included.
        credential_age_seconds: Age of the credential when the request was
            sent, None if no credential was attached.
    """

    model_config = ConfigDict(frozen=True)

    scenario: str
    status_code: int
    body: str
    spot: FavoriteSpotResponse | None = None
    duration_ms: float
    credential_age_seconds: float | None = None


def parse_spot(body: str) -> FavoriteSpotResponse:
    """Read a success body into a ``FavoriteSpotResponse``.

    Raises:
        ResponseShapeError: If the body is not a well-formed spot, including
            a ``created_at`` outside the two accepted layouts.
    """
    try:
        return FavoriteSpotResponse.model_validate_json(body)
    except ValidationError as e:
        raise ResponseShapeError(
            message=f"Response body is not a favorite spot: {e}. Body: {body}",
            body=body,
            cause=e,
        ) from e


def _expect(field: str, expected: Any, observed: Any, body: str) -> None:
    if expected != observed:
        raise ExpectationError(
            message=f"{field}: expected {expected!r}, got {observed!r}. Body: {body}",
            field=field,
            expected=expected,
            observed=observed,
            body=body,
        )


def check_spot(scenario: Scenario, spot: FavoriteSpotResponse, body: str) -> None:
    """Apply a scenario's field-level expectations to a parsed spot.

    Raises:
        ExpectationError: On the first mismatching field.
    """
    request = scenario.request
    if scenario.expect_echo:
        _expect("title", request.title, spot.title, body)
        _expect("lat", request.coordinate("lat"), spot.lat, body)
        _expect("lon", request.coordinate("lon"), spot.lon, body)

    expected_color = scenario.expected_color.value if scenario.expected_color else None
    _expect("color", expected_color, spot.color, body)


def _record_failure(error: ConformanceError) -> None:
    assertion = (UnexpectedStatusError, ResponseShapeError, ExpectationError)
    outcome = "failed" if isinstance(error, assertion) else "error"
    record_scenario(outcome)
    logger.warning(
        "scenario.failed",
        outcome=outcome,
        error=error.message,
        error_type=type(error).__name__,
    )


class ScenarioRunner:
    """Runs scenarios, one fresh client per run.

    Attributes:
        config: Conformance configuration.
    """

    def __init__(
        self,
        config: ConformanceConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self.config = config
        self._client_factory: ClientFactory = client_factory or FavoritesClient

    def _credential_for(
        self, client: FavoritesClient, mode: CredentialMode
    ) -> SessionCredential | None:
        if mode is CredentialMode.NONE:
            return None

        credential = client.acquire_session()
        if mode is CredentialMode.EXPIRED:
            logger.info(
                "scenario.expiry_wait",
                wait_seconds=self.config.expiry_wait_seconds,
                token_ttl_seconds=self.config.token_ttl_seconds,
            )
            time.sleep(self.config.expiry_wait_seconds)
        return credential

    def run(self, scenario: Scenario) -> ScenarioResult:
        """Run one scenario.

        Returns:
            The observed outcome, when it matches every expectation.

        Raises:
            SessionAcquisitionError: If a required credential could not be
                acquired.
            TransportFailure: If a request could not be completed.
            UnexpectedStatusError: If the status differs from the expected one.
            ResponseShapeError: If a success body is malformed.
            ExpectationError: If a success body carries unexpected values.
        """
        with scenario_context(scenario.name):
            return self._run(scenario)

    def _run(self, scenario: Scenario) -> ScenarioResult:
        logger.info("scenario.started")
        started = time.perf_counter()

        try:
            with self._client_factory(self.config) as client:
                credential = self._credential_for(client, scenario.credential)
                credential_age = credential.age_seconds() if credential else None
                response = client.submit_spot(
                    scenario.request,
                    credential,
                    raw=scenario.raw_encoding,
                )

            body = response.text
            if response.status_code != scenario.expected_status:
                raise UnexpectedStatusError(
                    message=(
                        f"Scenario {scenario.name!r}: expected status "
                        f"{scenario.expected_status}, got {response.status_code}. "
                        f"Body: {body}"
                    ),
                    expected=scenario.expected_status,
                    observed=response.status_code,
                    body=body,
                )

            spot = None
            if response.status_code == 200:
                spot = parse_spot(body)
                check_spot(scenario, spot, body)
        except ConformanceError as e:
            _record_failure(e)
            raise

        duration_ms = (time.perf_counter() - started) * 1000
        record_scenario("passed")
        logger.info(
            "scenario.passed",
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        return ScenarioResult(
            scenario=scenario.name,
            status_code=response.status_code,
            body=body,
            spot=spot,
            duration_ms=duration_ms,
            credential_age_seconds=credential_age,
        )

    def run_sequential_ids(
        self, request: FavoriteSpotRequest
    ) -> tuple[FavoriteSpotResponse, FavoriteSpotResponse]:
        """Create the same spot twice in one session and compare the ids.

        The verdict is counted and logged like a ``run`` verdict, under the
        scenario name ``sequential-ids``.

        Returns:
            The first and second spot.

        Raises:
            ExpectationError: If the second id is not strictly greater.
            UnexpectedStatusError: If either creation does not return 200.
        """
        with scenario_context("sequential-ids"):
            try:
                first, second = self._create_twice(request)
            except ConformanceError as e:
                _record_failure(e)
                raise

            record_scenario("passed")
            logger.info("scenario.passed", first_id=first.id, second_id=second.id)
            return first, second

    def _create_twice(
        self, request: FavoriteSpotRequest
    ) -> tuple[FavoriteSpotResponse, FavoriteSpotResponse]:
        spots: list[FavoriteSpotResponse] = []
        with self._client_factory(self.config) as client:
            credential = client.acquire_session()
            for _ in range(2):
                response = client.submit_spot(request, credential)
                if response.status_code != 200:
                    raise UnexpectedStatusError(
                        message=(
                            f"Sequential creation: expected status 200, got "
                            f"{response.status_code}. Body: {response.text}"
                        ),
                        expected=200,
                        observed=response.status_code,
                        body=response.text,
                    )
                spots.append(parse_spot(response.text))

        first, second = spots
        if second.id <= first.id:
            raise ExpectationError(
                message=f"id: expected second id > {first.id}, got {second.id}",
                field="id",
                expected=f"> {first.id}",
                observed=second.id,
                body=response.text,
            )
        return first, second
