"""HLTV client using nodriver to get past Cloudflare.

Uses a real Chrome browser to navigate HLTV pages, waiting out Cloudflare
challenges. Integrates RateLimiter for request pacing and tenacity for
retry logic. ``get()`` goes from a Request to converted records::

    async with HLTVClient() as client:
        page = await client.get(get_match(2346065))

Why nodriver instead of a plain HTTP client:
  HLTV serves an active Cloudflare JavaScript challenge that no HTTP-only
  client can solve. nodriver runs real Chrome, which solves it natively.
"""

import asyncio
import logging
from collections import Counter, defaultdict
from typing import Any
from urllib.parse import urlsplit

import nodriver
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from hltv.config import ClientConfig
from hltv.dom import parse_document
from hltv.exceptions import (
    CloudflareChallenge,
    ConversionError,
    HLTVError,
    HLTVFetchError,
    PageNotFound,
)
from hltv.rate_limiter import RateLimiter
from hltv.request import Request
from hltv.storage import SnapshotStore

logger = logging.getLogger(__name__)

# Challenge page indicators in the page title (including localized variants)
_CHALLENGE_TITLES = (
    "Just a moment",
    "Checking your browser",
    "Et øjeblik",          # Danish
    "Einen Moment",        # German
    "Un instant",          # French
    "Un momento",          # Spanish, Italian
    "Um momento",          # Portuguese
    "Een moment",          # Dutch
)

_NOT_FOUND_TITLES = ("Page not found", "404 Not Found")

_POLL_INTERVAL = 2
_SELECTOR_TIMEOUT = 5.0

_HTML_JS = "document.documentElement.outerHTML"


def _is_challenge(title: str) -> bool:
    return any(sig in title for sig in _CHALLENGE_TITLES)


def _is_not_found(title: str) -> bool:
    return any(sig in title for sig in _NOT_FOUND_TITLES)


def snapshot_key(request: Request) -> str:
    """Snapshot key for a request: the ID for detail pages, else the query."""
    parts = urlsplit(request.url)
    if request.kind in ("match", "team"):
        segments = [p for p in parts.path.split("/") if p]
        return segments[1]
    return parts.query or "all"


class HLTVClient:
    """Fetches HLTV pages through a single nodriver-controlled Chrome tab.

    On start(), launches Chrome, opens the HLTV homepage and waits for any
    Cloudflare challenge to clear. fetch() returns page HTML; get() also
    converts it with the request's converter, saving a snapshot first
    when a SnapshotStore is configured.

    Conversion errors are raised after the fetch and are never retried.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        store: SnapshotStore | None = None,
    ):
        if config is None:
            config = ClientConfig()

        self._config = config
        self.rate_limiter = RateLimiter(config)
        self._browser: nodriver.Browser | None = None
        self._tab = None
        if store is None and config.save_html:
            store = SnapshotStore(config.data_dir)
        self._store = store

        # Request counters
        self._request_count = 0
        self._success_count = 0
        self._challenge_count = 0
        # kind -> converted / fetch_failed / convert_failed
        self._outcomes: defaultdict[str, Counter] = defaultdict(Counter)

        # Override tenacity stop condition with config value
        self._patch_retry()

    async def start(self) -> None:
        """Launch Chrome and warm up Cloudflare trust on the homepage."""
        browser_args = [
            "--window-position=0,0",
            "--window-size=1280,900",
            # Remove navigator.webdriver and automation signals
            "--disable-blink-features=AutomationControlled",
            "--lang=en-US,en",
            "--no-first-run",
            "--no-default-browser-check",
        ]
        self._browser = await nodriver.start(
            headless=False,
            browser_args=browser_args,
            no_sandbox=True,
        )

        logger.info("Warming up browser on %s ...", self._config.base_url)
        self._tab = await self._browser.get(self._config.base_url)
        await asyncio.sleep(self._config.page_load_wait)

        if await self._wait_for_clearance():
            logger.info("Browser ready")
        else:
            logger.warning(
                "Cloudflare challenge did not clear after %.0fs warm-up. "
                "Proceeding anyway, fetches may retry.",
                self._config.challenge_wait,
            )

    async def _title(self) -> str:
        # nodriver may return ExceptionDetails instead of str on error
        title = await self._tab.evaluate("document.title")
        return title if isinstance(title, str) else ""

    async def _wait_for_clearance(self) -> bool:
        """Poll the title until no challenge is shown; False on timeout."""
        elapsed = 0.0
        while True:
            if not _is_challenge(await self._title()):
                return True
            if elapsed >= self._config.challenge_wait:
                return False
            await asyncio.sleep(_POLL_INTERVAL)
            elapsed += _POLL_INTERVAL

    async def _wait_for_selector(self, url: str, selector: str) -> None:
        """Poll the live DOM until ``selector`` matches an element.

        A fully loaded page without the element is left to the converter to
        judge. A page still loading after the timeout raises HLTVFetchError
        so the fetch is retried.
        """
        js = f"!!document.querySelector({selector!r})"
        elapsed = 0.0
        interval = 0.1
        while elapsed < _SELECTOR_TIMEOUT:
            if await self._tab.evaluate(js) is True:
                return
            await asyncio.sleep(interval)
            elapsed += interval
            interval = min(interval * 2, 0.5)

        if await self._tab.evaluate("document.readyState === 'complete'") is True:
            logger.debug("Selector %r not found on loaded page %s", selector, url)
            return
        raise HLTVFetchError(
            f"Ready selector {selector!r} not found on {url} "
            f"after {_SELECTOR_TIMEOUT:.0f}s",
            url=url,
        )

    def _challenged(self, message: str, url: str) -> CloudflareChallenge:
        self._challenge_count += 1
        self.rate_limiter.backoff("Cloudflare challenge")
        return CloudflareChallenge(message, url=url)

    async def _fetch_once(self, url: str, ready_selector: str | None) -> str:
        """Navigate to ``url`` and return the rendered HTML. No retries."""
        await self.rate_limiter.wait()
        self._request_count += 1

        try:
            await asyncio.wait_for(
                self._tab.get(url), timeout=self._config.navigation_timeout
            )
            await asyncio.sleep(0.1 if ready_selector else self._config.page_load_wait)

            title = await self._title()
            if _is_challenge(title):
                logger.info("Challenge detected on %s, waiting...", url)
                if not await self._wait_for_clearance():
                    raise self._challenged(
                        f"Cloudflare challenge on {url} (title: {title!r})", url
                    )
                title = await self._title()

            if _is_not_found(title):
                raise PageNotFound(f"Page not found: {url}", url=url)

            if ready_selector:
                await self._wait_for_selector(url, ready_selector)

            html = await self._tab.evaluate(_HTML_JS)
            if not isinstance(html, str):
                html = ""

            # Catches challenges behind localized titles
            if "/cdn-cgi/challenge-platform/" in html and "cf-turnstile-response" in html:
                raise self._challenged(
                    f"Cloudflare challenge detected in HTML on {url}", url
                )
            if not html:
                raise HLTVFetchError(f"Empty response from {url}", url=url)

        except HLTVError:
            raise
        except Exception as exc:
            self.rate_limiter.backoff(f"{type(exc).__name__} on {url}")
            raise HLTVFetchError(f"Failed to fetch {url}: {exc}", url=url) from exc

        self.rate_limiter.recover()
        self._success_count += 1
        logger.debug("Fetched %s (%d chars)", url, len(html))
        return html

    @retry(
        retry=(
            retry_if_exception_type((CloudflareChallenge, HLTVFetchError))
            & retry_if_not_exception_type(PageNotFound)
        ),
        wait=wait_exponential_jitter(initial=1, max=15, jitter=1),
        stop=stop_after_attempt(5),  # overridden in _patch_retry
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def fetch(self, url: str, ready_selector: str | None = None) -> str:
        """Fetch a URL and return the page HTML.

        Args:
            url: The full URL to fetch.
            ready_selector: Optional CSS selector that must exist in the
                live DOM before the page is considered loaded.

        Raises:
            CloudflareChallenge: If the challenge persists after retries.
            PageNotFound: If HLTV shows its 404 page. Not retried.
            HLTVFetchError: If navigation fails or the page stays empty.
        """
        if self._browser is None or self._tab is None:
            raise HLTVFetchError("Browser not started. Call start() first.", url=url)
        return await self._fetch_once(url, ready_selector)

    async def get(self, request: Request) -> Any:
        """Fetch ``request.url`` and convert it with ``request.convert``.

        Outcomes are tallied per page kind in ``stats["pages"]``.

        Raises:
            ConversionError: If the fetched page does not match its layout.
            HLTVFetchError, CloudflareChallenge: See fetch().
        """
        try:
            html = await self.fetch(request.url, ready_selector=request.ready_selector)
        except HLTVError:
            self._outcomes[request.kind]["fetch_failed"] += 1
            raise
        if self._store is not None:
            path = self._store.save(html, request.kind, snapshot_key(request))
            logger.debug("Saved snapshot %s", path)
        try:
            records = request.convert(parse_document(html))
        except ConversionError:
            self._outcomes[request.kind]["convert_failed"] += 1
            raise
        self._outcomes[request.kind]["converted"] += 1
        return records

    async def close(self) -> None:
        """Stop Chrome and log a per-kind summary. Safe to call twice."""
        if not self._browser:
            return
        browser = self._browser
        self._browser = None
        self._tab = None
        browser.stop()
        for kind, counts in sorted(self._outcomes.items()):
            logger.info(
                "%s pages: %d converted, %d fetch failures, %d conversion failures",
                kind, counts["converted"], counts["fetch_failed"], counts["convert_failed"],
            )

    async def __aenter__(self) -> "HLTVClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    @property
    def stats(self) -> dict:
        """Return current client statistics."""
        total = self._request_count
        return {
            "requests": total,
            "successes": self._success_count,
            "challenges": self._challenge_count,
            "success_rate": (self._success_count / total) if total > 0 else 0.0,
            "current_delay": self.rate_limiter.current_delay,
            "failure_streak": self.rate_limiter.failure_streak,
            "pages": {kind: dict(counts) for kind, counts in self._outcomes.items()},
        }

    def _patch_retry(self) -> None:
        """Patch tenacity stop condition to use config.max_retries."""
        self.fetch.retry.stop = stop_after_attempt(self._config.max_retries)
