"""Exception hierarchy for the HLTV page converters and fetcher.

Exception tree:
    HLTVError
    +-- ConversionError            (page could not be turned into a record)
    |   +-- StructureNotFound      (expected container missing)
    |   +-- AttributeMissing       (element found, attribute missing)
    |   +-- ValueParseFailure      (value present but not coercible)
    |   +-- UnrecognizedSchemaVariant  (valid value outside known domain)
    +-- CloudflareChallenge        (Cloudflare served a challenge page)
    +-- HLTVFetchError             (navigation failed or page unusable)
        +-- PageNotFound           (HLTV 404 page, not retried)
"""

from typing import Optional


class HLTVError(Exception):
    """Base exception for all errors raised by this package."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
    ):
        self.url = url
        super().__init__(message)


class ConversionError(HLTVError, ValueError):
    """A parsed document does not match the page layout it was given to.

    Subclasses ValueError so callers that treat malformed input as a
    value problem keep working.
    """

    pass


class StructureNotFound(ConversionError):
    """An expected container is absent -- layout change or wrong page type."""

    pass


class AttributeMissing(ConversionError):
    """An element was located but lacks a required attribute."""

    pass


class ValueParseFailure(ConversionError):
    """A present attribute or text could not be coerced to the expected type."""

    pass


class UnrecognizedSchemaVariant(ConversionError):
    """A value is syntactically valid but outside the known domain.

    Example: a match page with 2 or 4 map holders.
    """

    pass


class CloudflareChallenge(HLTVError):
    """Cloudflare served a challenge page instead of real content.

    This is a retriable error -- the fetcher backs off and retries.
    """

    pass


class HLTVFetchError(HLTVError):
    """Navigation failed or the fetched page was unusable. Retried by fetch()."""

    pass


class PageNotFound(HLTVFetchError):
    """The requested page does not exist on HLTV.

    Never retried, so callers can skip the ID instead of waiting out backoff.
    """

    pass
