"""The favorites API contract, written down as scenarios.

``build_catalogue`` returns one ``Scenario`` per case the service must
handle: authentication, missing and blank fields, coordinate ranges and
boundaries, title length and alphabet, and color tokens. Scenario names
are unique and double as pytest ids.

Scenarios carrying a ``known_issue`` describe behavior the live service is
known not to match, or a transport artifact of unescaped form bodies.
"""

from favorites_conformance.models import CredentialMode, FavoriteSpotRequest, SpotColor
from favorites_conformance.runner import Scenario

TITLE = "Favorite Spot"
MAX_TITLE_LENGTH = 999

# Titles the service must accept and echo verbatim
TITLE_FORMATS = [
    "Favorite Spot",
    "Избра++//^^%{}нное Место",
    "ул. Пушкина, д. 17, к. 2",
    ".",
    "583948920138",
    "Plushies & More! 100% (Best) @place#",
]

BLANK_TITLES = ["", " ", "  "]

# Titles outside the accepted alphabet
FOREIGN_ALPHABET_TITLES = ["测试 \U0001f60a", "测试", "\U0001f60a"]

OUT_OF_RANGE_LATITUDES = [
    (90.0001, 125.65),
    (-90.0001, 125.65),
    (-1000.0001, 125.65),
    (-2000.0001, 125.65),
    (float("inf"), 0.0),
]
OUT_OF_RANGE_LONGITUDES = [
    (45.64, 180.00001),
    (45.64, -180.00001),
    (45.64, 1000.00001),
    (45.64, -2000.00001),
    (0.0, float("inf")),
]

BOUNDARY_COORDINATES = [(90.0, 180.0), (-90.0, -180.0), (90.0, -180.0), (-90.0, 180.0)]

INVALID_COLORS = ["", "#FF0000", "rgb(255,0,0)", "invalid-color"]
LOWERCASE_COLORS = ["blue", "green", "red", "yellow"]

NAN_ISSUE = "Live service accepts NaN coordinates"
LENGTH_ISSUE = "Live service accepts 1000-character titles"
LOWERCASE_COLOR_ISSUE = "Live service is believed to accept lowercase colors (suspected defect)"
FOREIGN_ALPHABET_ISSUE = "Live service accepts titles in other alphabets and emoji"
ZERO_COORDINATES_ISSUE = "Live service answers 0/0 coordinates with 500"
RAW_AMPERSAND_ISSUE = "Unescaped '&' ends the title field; the service sees a truncated title"
RAW_PLUS_ISSUE = "Unescaped '+' is decoded to a space by form encoding"


def _spot(**fields: object) -> FavoriteSpotRequest:
    return FavoriteSpotRequest(**fields)


def _rejected(name: str, request: FavoriteSpotRequest, **kwargs: object) -> Scenario:
    return Scenario(name=name, request=request, expected_status=400, **kwargs)


def _accepted(name: str, request: FavoriteSpotRequest, **kwargs: object) -> Scenario:
    return Scenario(name=name, request=request, expected_status=200, **kwargs)


def _authentication() -> list[Scenario]:
    return [
        _accepted("valid-spot", _spot(title=TITLE, lat=24.24, lon=90.0)),
        Scenario(
            name="no-credential",
            request=_spot(title=TITLE, lat=27.27, lon=27.27),
            credential=CredentialMode.NONE,
            expected_status=401,
        ),
        Scenario(
            name="expired-credential",
            request=_spot(title=TITLE, lat=27.2638, lon=34.2765),
            credential=CredentialMode.EXPIRED,
            expected_status=401,
        ),
    ]


def _missing_fields() -> list[Scenario]:
    scenarios = [
        _rejected(f"blank-title-{len(title)}", _spot(title=title, lat=20.0, lon=20.0))
        for title in BLANK_TITLES
    ]
    scenarios += [
        _rejected("omitted-title", _spot(lat=50.0, lon=50.0)),
        _rejected("blank-lat", _spot(title=TITLE, lat="", lon=50.0)),
        _rejected("blank-lon", _spot(title=TITLE, lat=50.0, lon="")),
        _rejected("omitted-lat", _spot(title=TITLE, lon=50.0)),
        _rejected("omitted-lon", _spot(title=TITLE, lat=50.0)),
    ]
    return scenarios


def _coordinates() -> list[Scenario]:
    scenarios = [
        _rejected(f"lat-out-of-range-{lat}", _spot(title=TITLE, lat=lat, lon=lon))
        for lat, lon in OUT_OF_RANGE_LATITUDES
    ]
    scenarios += [
        _rejected(f"lon-out-of-range-{lon}", _spot(title=TITLE, lat=lat, lon=lon))
        for lat, lon in OUT_OF_RANGE_LONGITUDES
    ]
    scenarios += [
        _accepted(f"boundary-{lat}-{lon}", _spot(title=TITLE, lat=lat, lon=lon))
        for lat, lon in BOUNDARY_COORDINATES
    ]
    scenarios += [
        _accepted(
            "zero-coordinates",
            _spot(title=TITLE, lat=0.0, lon=0.0),
            known_issue=ZERO_COORDINATES_ISSUE,
        ),
        _rejected(
            "nan-coordinates",
            _spot(title=TITLE, lat=float("nan"), lon=float("nan")),
            known_issue=NAN_ISSUE,
        ),
        _rejected("nan-lat", _spot(title=TITLE, lat=float("nan"), lon=10.0), known_issue=NAN_ISSUE),
        _rejected("negative-infinity-lon", _spot(title=TITLE, lat=10.0, lon=float("-inf"))),
        _rejected("non-numeric-lat", _spot(title=TITLE, lat="north", lon=10.0)),
    ]
    return scenarios


def _titles() -> list[Scenario]:
    scenarios = [
        _accepted(f"title-format-{index}", _spot(title=title, lat=1.0, lon=1.0))
        for index, title in enumerate(TITLE_FORMATS)
    ]
    scenarios += [
        _accepted("title-length-1", _spot(title="a", lat=50.0, lon=50.0)),
        _accepted(
            f"title-length-{MAX_TITLE_LENGTH}",
            _spot(title="a" * MAX_TITLE_LENGTH, lat=50.0, lon=50.0),
        ),
        _rejected(
            f"title-length-{MAX_TITLE_LENGTH + 1}",
            _spot(title="a" * (MAX_TITLE_LENGTH + 1), lat=50.0, lon=50.0),
            known_issue=LENGTH_ISSUE,
        ),
    ]
    scenarios += [
        _rejected(
            f"foreign-alphabet-{index}",
            _spot(title=title, lat=25.25, lon=25.25),
            known_issue=FOREIGN_ALPHABET_ISSUE,
        )
        for index, title in enumerate(FOREIGN_ALPHABET_TITLES)
    ]
    scenarios += [
        _accepted(
            "raw-ampersand-title",
            _spot(title="Plushies & More", lat=1.0, lon=1.0),
            raw_encoding=True,
            known_issue=RAW_AMPERSAND_ISSUE,
        ),
        _accepted(
            "raw-plus-title",
            _spot(title="Избра++нное", lat=1.0, lon=1.0),
            raw_encoding=True,
            known_issue=RAW_PLUS_ISSUE,
        ),
    ]
    return scenarios


def _colors() -> list[Scenario]:
    scenarios = [
        _accepted(
            f"color-{color.value}",
            _spot(title="Colored Location", lat=55.7558, lon=37.6173, color=color),
            expected_color=color,
        )
        for color in SpotColor
    ]
    scenarios += [
        _rejected(
            f"color-invalid-{index}",
            _spot(title="Colored Location", lat=55.7558, lon=37.6173, color=color),
        )
        for index, color in enumerate(INVALID_COLORS)
    ]
    scenarios += [
        _rejected(
            f"color-lowercase-{color}",
            _spot(title="Colored Location", lat=55.7558, lon=37.6173, color=color),
            known_issue=LOWERCASE_COLOR_ISSUE,
        )
        for color in LOWERCASE_COLORS
    ]
    return scenarios


def build_catalogue() -> list[Scenario]:
    """Return every scenario of the favorites contract.

    Examples:
        >>> names = [scenario.name for scenario in build_catalogue()]
        >>> len(names) == len(set(names))
        True
    """
    return _authentication() + _missing_fields() + _coordinates() + _titles() + _colors()


def by_name(name: str) -> Scenario:
    """Look up one catalogue scenario.

    Raises:
        KeyError: If no scenario has that name.
    """
    for scenario in build_catalogue():
        if scenario.name == name:
            return scenario
    raise KeyError(name)
