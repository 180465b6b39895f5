"""Value objects exchanged with the favorites service.

This module provides the data structures the suite builds requests from
and reads responses into: the session credential, the spot creation
request, the spot returned by the service, and the enumerations that
classify them.

Examples:
    Building a request and its form body::

        from favorites_conformance.models import FavoriteSpotRequest, SpotColor

        request = FavoriteSpotRequest(
            title="Favorite Spot",
            lat=55.7558,
            lon=37.6173,
            color=SpotColor.RED,
        )
        request.encode()
        # 'title=Favorite+Spot&lat=55.7558&lon=37.6173&color=RED'

    Reading a response body::

        from favorites_conformance.models import FavoriteSpotResponse

        spot = FavoriteSpotResponse.model_validate_json(response.text)
        spot.created_at_value.utcoffset()
"""

import math
from datetime import UTC, datetime
from enum import Enum
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

from favorites_conformance.timestamp import IsoTimestamp, parse


class SpotColor(str, Enum):
    """Colors the service documents for a favorite spot (exact uppercase)."""

    BLUE = "BLUE"
    GREEN = "GREEN"
    RED = "RED"
    YELLOW = "YELLOW"


class CredentialMode(str, Enum):
    """How a scenario authenticates its spot creation request.

    Attributes:
        NONE: No credential is attached.
        FRESH: A credential is acquired right before the request.
        EXPIRED: A credential is acquired, then the runner blocks past the
            server-side expiry window before sending the request.
    """

    NONE = "NONE"
    FRESH = "FRESH"
    EXPIRED = "EXPIRED"


class SessionCredential(BaseModel):
    """An opaque session cookie issued by the token endpoint.

    Attributes:
        name: Cookie name.
        value: Raw cookie value.
        acquired_at: When the suite received the cookie (UTC).

    Examples:
        >>> credential = SessionCredential(name="token", value="abc")
        >>> credential.cookie_header
        'token=abc'
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Cookie name")
    value: str = Field(..., description="Raw cookie value")
    acquired_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the credential was received",
    )

    @property
    def cookie_header(self) -> str:
        """The credential rendered as a ``Cookie`` header value."""
        return f"{self.name}={self.value}"

    def age_seconds(self, now: datetime | None = None) -> float:
        now = now or datetime.now(UTC)
        return (now - self.acquired_at).total_seconds()

    def is_expired(self, window_seconds: float, now: datetime | None = None) -> bool:
        """Whether the credential has outlived a server-side window.

        Args:
            window_seconds: Server-side lifetime of a credential.
            now: Reference time. Defaults to the current UTC time.
        """
        return self.age_seconds(now) >= window_seconds


def _render_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


class FavoriteSpotRequest(BaseModel):
    """Fields of a spot creation request, possibly missing or malformed.

    Every field is optional so that scenarios can describe bad requests.
    ``None`` omits the field from the body entirely; an empty string sends
    it blank. Coordinates may be floats (rendered so that non-finite values
    read ``NaN``, ``Infinity`` and ``-Infinity``) or raw strings sent as-is.
    ``color`` accepts any string so unrecognized tokens can be sent.

    Attributes:
        title: Spot name.
        lat: Latitude.
        lon: Longitude.
        color: Color token.
    """

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    lat: float | str | None = None
    lon: float | str | None = None
    color: SpotColor | str | None = None

    def form_fields(self) -> list[tuple[str, str]]:
        """Return the fields that are present, in wire order.

        Examples:
            >>> FavoriteSpotRequest(title="x", lat=0.0, lon=float("inf")).form_fields()
            [('title', 'x'), ('lat', '0.0'), ('lon', 'Infinity')]
        """
        fields: list[tuple[str, str]] = []
        if self.title is not None:
            fields.append(("title", self.title))
        for name in ("lat", "lon"):
            value = getattr(self, name)
            if value is None:
                continue
            fields.append((name, value if isinstance(value, str) else _render_number(value)))
        if self.color is not None:
            color = self.color.value if isinstance(self.color, SpotColor) else self.color
            fields.append(("color", color))
        return fields

    def encode(self, raw: bool = False) -> str:
        """Render the form-urlencoded body.

        Args:
            raw: When True, join the values without escaping them. The
                service then reads a title containing ``&`` as ending at the
                ``&`` and decodes ``+`` to a space.

        Examples:
            >>> FavoriteSpotRequest(title="A & B", lat=1.0, lon=1.0).encode()
            'title=A+%26+B&lat=1.0&lon=1.0'
            >>> FavoriteSpotRequest(title="A & B", lat=1.0, lon=1.0).encode(raw=True)
            'title=A & B&lat=1.0&lon=1.0'
        """
        fields = self.form_fields()
        if raw:
            return "&".join(f"{name}={value}" for name, value in fields)
        return urlencode(fields)

    def coordinate(self, name: str) -> float | None:
        """Return ``lat`` or ``lon`` as the float the service should echo.

        Returns None when the field is missing or not a number.
        """
        value = getattr(self, name)
        if value is None:
            return None
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                return None
        return float(value)


class FavoriteSpotResponse(BaseModel):
    """A spot as returned by a successful creation call.

    Attributes:
        id: Server-assigned identifier, increasing within a session.
        title: Echoed title.
        lat: Echoed latitude.
        lon: Echoed longitude.
        color: Echoed color, None when no color was supplied.
        created_at: Creation time in one of the two accepted layouts.
    """

    # Strict: a quoted number is a shape mismatch, not a coercion
    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)

    id: int = Field(..., description="Server-assigned identifier")
    title: str = Field(..., description="Echoed title")
    lat: float = Field(..., description="Echoed latitude")
    lon: float = Field(..., description="Echoed longitude")
    color: str | None = Field(default=None, description="Echoed color token")
    created_at: IsoTimestamp = Field(
        ...,
        description="Creation timestamp with numeric UTC offset",
        examples=["2024-05-20T12:34:56+03:00", "2024-05-20T12:34:56.789+03:00"],
    )

    @property
    def created_at_value(self) -> datetime:
        """``created_at`` parsed into an offset-aware datetime."""
        parsed = parse(self.created_at)
        if parsed is None:
            raise ValueError(f"created_at is not a valid timestamp: {self.created_at!r}")
        return parsed
