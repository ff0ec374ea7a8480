"""Extraction helpers shared by the page converters."""

from datetime import datetime, timezone
from urllib.parse import urlsplit

from hltv.config import HLTV_BASE_URL
from hltv.exceptions import AttributeMissing, StructureNotFound, ValueParseFailure
from hltv.rich import RichNode



def id_from_href(href: str | None, segment: str) -> int:
    """Extract the numeric ID following ``segment`` in a URL path.

    ``id_from_href("/matches/2346065/astralis-vs-vitality", "matches")``
    returns 2346065. Absolute URLs are accepted.

    Raises:
        AttributeMissing: If ``href`` is None.
        ValueParseFailure: If the segment is absent or not followed by a
            non-negative integer.
    """
    if href is None:
        raise AttributeMissing(f"Missing href for /{segment}/ link")
    parts = [p for p in urlsplit(href).path.split("/") if p]
    try:
        raw = parts[parts.index(segment) + 1]
    except (ValueError, IndexError):
        raise ValueParseFailure(
            f"No /{segment}/<id> path segment in {href!r}"
        ) from None
    if not (raw.isascii() and raw.isdigit()):
        raise ValueParseFailure(f"Non-numeric {segment} ID {raw!r} in {href!r}")
    return int(raw)


def canonical_id(root: RichNode, segment: str) -> int:
    """ID from the page's own ``<link>`` pointing at ``/{segment}/{id}/``.

    Raises:
        StructureNotFound: If no such link exists.
        ValueParseFailure: If the ID segment is not numeric.
    """
    prefix = f"{HLTV_BASE_URL}/{segment}/"
    for link in root.find_tags("link"):
        href = link.attr("href")
        if href and href.startswith(prefix):
            return id_from_href(href, segment)
    raise StructureNotFound(f"No link to {prefix}<id> found in document")


def unix_ms_to_datetime(value: int) -> datetime:
    """Convert HLTV's millisecond timestamps to an aware UTC datetime.

    Raises:
        ValueParseFailure: If the timestamp is outside the platform's
            representable range.
    """
    try:
        return datetime.fromtimestamp(value // 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise ValueParseFailure(f"Timestamp {value} ms is out of range") from exc


def require(node: RichNode, description: str) -> RichNode:
    """Return ``node`` or raise StructureNotFound when it is absent."""
    if not node.exists:
        raise StructureNotFound(f"Missing {description}")
    return node


def require_text(node: RichNode, description: str) -> str:
    """Non-empty text of ``node``, else StructureNotFound."""
    text = node.text()
    if not text:
        raise StructureNotFound(f"Missing {description}")
    return text


def require_attr(node: RichNode, name: str, description: str) -> str:
    """Attribute ``name`` of ``node``, else StructureNotFound/AttributeMissing."""
    require(node, description)
    value = node.attr(name)
    if value is None:
        raise AttributeMissing(f"Missing {name!r} attribute on {description}")
    return value


def parse_float(text: str) -> float:
    """Parse a stat value, treating HLTV's '-' (no data) as 0.0."""
    cleaned = text.rstrip("%").strip()
    if cleaned == "-":
        return 0.0
    return float(cleaned)
