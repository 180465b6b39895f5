"""
Black-box conformance suite for the favorites HTTP API.

This package drives the favorites service through its documented and
boundary behaviors (session acquisition, spot creation, field validation)
and strictly validates the offset-aware timestamps it returns.
"""

from favorites_conformance.catalogue import build_catalogue
from favorites_conformance.client import FavoritesClient
from favorites_conformance.config import ConformanceConfig
from favorites_conformance.models import (
    CredentialMode,
    FavoriteSpotRequest,
    FavoriteSpotResponse,
    SessionCredential,
    SpotColor,
)
from favorites_conformance.runner import Scenario, ScenarioResult, ScenarioRunner
from favorites_conformance.timestamp import is_valid, parse

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ConformanceConfig",
    "CredentialMode",
    "FavoriteSpotRequest",
    "FavoriteSpotResponse",
    "FavoritesClient",
    "Scenario",
    "ScenarioResult",
    "ScenarioRunner",
    "SessionCredential",
    "SpotColor",
    "build_catalogue",
    "is_valid",
    "parse",
]
