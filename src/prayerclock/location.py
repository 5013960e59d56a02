"""Location provider — coordinate parsing, Nominatim search, and timezone lookup."""

import logging

import httpx
from timezonefinder import TimezoneFinder

from prayerclock.models import Coordinates, LocationResult, ObserverContext

logger = logging.getLogger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
USER_AGENT = "prayerclock/0.1 (prayer times calculator)"
CUSTOM_COORDINATE_NAME = "Custom Coordinate"

_tf = TimezoneFinder()


class GeocodingError(Exception):
    """Location lookup failure."""


def parse_coordinates(text: str) -> LocationResult | None:
    """Parse a ``"lat,lon"`` string. Spaces around each number are ignored.

    Returns None unless the input holds exactly two numbers with latitude in
    [-90, 90] and longitude in [-180, 180].
    """
    parts = [part.strip() for part in text.split(",")]
    if len(parts) != 2:
        return None
    try:
        lat, lon = float(parts[0]), float(parts[1])
    except ValueError:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return LocationResult(
        name=CUSTOM_COORDINATE_NAME,
        country=f"{lat:.4f}, {lon:.4f}",
        coordinates=Coordinates(latitude=lat, longitude=lon),
    )


def _nominatim_search(
    query: str, client: httpx.Client | None = None, limit: int = 20
) -> list[LocationResult]:
    """Nominatim (OpenStreetMap) search in relevance order. Hits without a country are dropped."""
    params = {
        "q": query,
        "format": "json",
        "addressdetails": "1",
        "accept-language": "en",
        "limit": str(limit),
    }
    headers = {"User-Agent": USER_AGENT}
    get = client.get if client is not None else httpx.get
    try:
        resp = get(NOMINATIM_URL, params=params, headers=headers, timeout=10)
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise GeocodingError(f"Nominatim search failed: {e}") from e

    results: list[LocationResult] = []
    for r in data:
        address = r.get("address", {})
        country = address.get("country", "")
        if not country:
            continue
        name = (
            address.get("city")
            or address.get("town")
            or address.get("village")
            or address.get("county")
            or address.get("state")
            or r.get("display_name", "").split(",")[0]
        )
        results.append(
            LocationResult(
                name=name,
                country=country,
                coordinates=Coordinates(latitude=float(r["lat"]), longitude=float(r["lon"])),
            )
        )
    return results


def search_locations(
    query: str, client: httpx.Client | None = None
) -> list[LocationResult]:
    """Search for locations matching a free-text query.

    A parsable ``"lat,lon"`` query short-circuits the network call.

    Args:
        query: Place name or coordinate string.
        client: Optional httpx client (tests pass one with a mock transport).

    Returns:
        Distinct results sorted by name. Empty for a blank query.

    Raises:
        GeocodingError: On HTTP failure or an unreadable response.
    """
    query = query.strip()
    if not query:
        return []
    custom = parse_coordinates(query)
    if custom is not None:
        return [custom]

    seen: dict[tuple[str, str, int, int], LocationResult] = {}
    for result in _nominatim_search(query, client):
        key = (
            result.name,
            result.country,
            round(result.coordinates.latitude * 10000),
            round(result.coordinates.longitude * 10000),
        )
        seen.setdefault(key, result)
    return sorted(seen.values(), key=lambda r: r.name)


def timezone_for(coordinates: Coordinates) -> str:
    """IANA timezone name at a coordinate.

    Raises:
        GeocodingError: When no zone covers the coordinate.
    """
    tz_str = _tf.timezone_at(lat=coordinates.latitude, lng=coordinates.longitude)
    if tz_str is None:
        raise GeocodingError(
            f"Timezone not found: lat={coordinates.latitude}, lng={coordinates.longitude}"
        )
    return tz_str


def resolve_location(
    query: str, client: httpx.Client | None = None, timezone: str | None = None
) -> ObserverContext:
    """Resolve a place name or coordinate string to an ObserverContext.

    Args:
        query: Place name or ``"lat,lon"`` string.
        client: Optional httpx client.
        timezone: IANA zone override; looked up from the coordinate when None.

    Returns:
        ObserverContext with coordinates, timezone and a display name.

    Raises:
        GeocodingError: When the location or its timezone cannot be found.
    """
    result = parse_coordinates(query)
    if result is None:
        hits = _nominatim_search(query.strip(), client, limit=1) if query.strip() else []
        if not hits:
            raise GeocodingError(f"Location not found: {query}")
        result = hits[0]

    tz_str = timezone or timezone_for(result.coordinates)
    logger.debug("Resolved %r to %s (%s)", query, result.coordinates, tz_str)
    return ObserverContext(
        coordinates=result.coordinates,
        timezone=tz_str,
        display_name=f"{result.name}, {result.country}",
    )
