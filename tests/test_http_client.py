"""Unit tests for HLTVClient with a mocked nodriver browser.

All tests mock nodriver.start() and tab.evaluate() to avoid launching a
real browser or making real HTTP requests. Retry waits are disabled.
"""

import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from tenacity import wait_none

from hltv.config import ClientConfig
from hltv.exceptions import (
    CloudflareChallenge,
    HLTVFetchError,
    PageNotFound,
    StructureNotFound,
)
from hltv.http_client import HLTVClient, snapshot_key
from hltv.models import MatchStatus
from hltv.request import get_match, get_team, results, upcoming
from hltv.storage import SnapshotStore

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"
PAGE_HTML = "<html><body><div class='match-page'>x</div></body></html>"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_config(**overrides) -> ClientConfig:
    """Create a config with fast settings for testing."""
    defaults = {
        "max_retries": 2,
        "min_delay": 0.0,
        "max_delay": 0.0,
        "page_load_wait": 0.0,
        "challenge_wait": 0.0,
    }
    defaults.update(overrides)
    return ClientConfig(**defaults)


def _mock_page(title: str = "Match Page | HLTV.org", html: str = PAGE_HTML):
    """Create a mock nodriver tab with evaluate() and get()."""
    page = AsyncMock()

    async def evaluate_side_effect(js: str):
        if "document.title" in js:
            return title
        if "document.documentElement.outerHTML" in js:
            return html
        if "querySelector" in js or "readyState" in js:
            return True
        return ""

    page.evaluate = AsyncMock(side_effect=evaluate_side_effect)
    page.get = AsyncMock(return_value=page)
    return page


def _mock_browser(page=None):
    """Create a mock nodriver browser that returns a mock tab on get()."""
    if page is None:
        page = _mock_page()
    browser = AsyncMock()
    browser.get = AsyncMock(return_value=page)
    browser.stop = MagicMock()
    return browser


@pytest.fixture(autouse=True)
def no_retry_wait():
    with patch.object(HLTVClient.fetch.retry, "wait", wait_none()):
        yield


# ---------------------------------------------------------------------------
# fetch()
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
@patch("nodriver.start")
async def test_fetch_success_returns_html(mock_start):
    mock_start.return_value = _mock_browser()

    client = HLTVClient(_make_config())
    await client.start()
    result = await client.fetch("https://www.hltv.org/matches/12345/-")
    await client.close()

    assert result == PAGE_HTML


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_fetch_success_increments_counters(mock_start):
    mock_start.return_value = _mock_browser()

    client = HLTVClient(_make_config())
    await client.start()
    await client.fetch("https://www.hltv.org/test")
    await client.close()

    stats = client.stats
    assert stats["requests"] == 1
    assert stats["successes"] == 1
    assert stats["challenges"] == 0
    assert stats["success_rate"] == 1.0


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_fetch_waits_and_recovers(mock_start):
    mock_start.return_value = _mock_browser()

    client = HLTVClient(_make_config())
    await client.start()
    client.rate_limiter.wait = AsyncMock(return_value=0.0)
    client.rate_limiter.recover = MagicMock()

    await client.fetch("https://www.hltv.org/test")
    await client.close()

    client.rate_limiter.wait.assert_called_once()
    client.rate_limiter.recover.assert_called_once()


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_cloudflare_challenge_detected_by_title(mock_start):
    mock_start.return_value = _mock_browser()

    client = HLTVClient(_make_config(max_retries=1))
    await client.start()
    client._tab.evaluate = _mock_page(title="Just a moment...").evaluate
    client.rate_limiter.backoff = MagicMock()

    with pytest.raises(CloudflareChallenge):
        await client.fetch("https://www.hltv.org/test")

    await client.close()
    assert client.stats["challenges"] == 1
    client.rate_limiter.backoff.assert_called_once()


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_challenge_in_html_detected(mock_start):
    html = '<html><script src="/cdn-cgi/challenge-platform/x"></script><input name="cf-turnstile-response"></html>'
    mock_start.return_value = _mock_browser()

    client = HLTVClient(_make_config(max_retries=1))
    await client.start()
    client._tab.evaluate = _mock_page(title="HLTV.org", html=html).evaluate

    with pytest.raises(CloudflareChallenge, match="in HTML"):
        await client.fetch("https://www.hltv.org/test")
    await client.close()


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_challenge_clears_while_polling(mock_start):
    mock_start.return_value = _mock_browser()

    client = HLTVClient(_make_config(challenge_wait=10.0))
    await client.start()

    titles = iter(["Just a moment...", "Match Page | HLTV.org", "Match Page | HLTV.org"])

    async def switching_evaluate(js):
        if "document.title" in js:
            return next(titles)
        if "document.documentElement.outerHTML" in js:
            return PAGE_HTML
        return True

    client._tab.evaluate = AsyncMock(side_effect=switching_evaluate)

    assert await client.fetch("https://www.hltv.org/test") == PAGE_HTML
    await client.close()


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_retry_after_navigation_error(mock_start):
    page = _mock_page()
    mock_start.return_value = _mock_browser(page)

    client = HLTVClient(_make_config(max_retries=3))
    await client.start()
    page.get = AsyncMock(side_effect=[RuntimeError("CDP connection lost"), page])

    assert await client.fetch("https://www.hltv.org/test") == PAGE_HTML
    await client.close()

    assert client.stats["requests"] == 2
    assert client.stats["successes"] == 1


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_gives_up_after_max_retries(mock_start):
    page = _mock_page()
    mock_start.return_value = _mock_browser(page)

    client = HLTVClient(_make_config(max_retries=2))
    await client.start()
    page.get = AsyncMock(side_effect=RuntimeError("boom"))

    with pytest.raises(HLTVFetchError, match="boom"):
        await client.fetch("https://www.hltv.org/test")
    await client.close()

    assert page.get.call_count == 2


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_page_not_found_is_not_retried(mock_start):
    mock_start.return_value = _mock_browser()

    client = HLTVClient(_make_config(max_retries=3))
    await client.start()
    client._tab.evaluate = _mock_page(title="404 - Page not found").evaluate

    with pytest.raises(PageNotFound):
        await client.fetch("https://www.hltv.org/matches/1/-")
    await client.close()

    assert client.stats["requests"] == 1


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_empty_response_raises_error(mock_start):
    mock_start.return_value = _mock_browser()

    client = HLTVClient(_make_config(max_retries=1))
    await client.start()
    client._tab.evaluate = _mock_page(html="").evaluate

    with pytest.raises(HLTVFetchError, match="Empty response"):
        await client.fetch("https://www.hltv.org/test")
    await client.close()


@pytest.mark.asyncio
async def test_fetch_without_start_raises_error():
    client = HLTVClient(_make_config())

    with pytest.raises(HLTVFetchError, match="Browser not started"):
        await client.fetch("https://www.hltv.org/test")


# ---------------------------------------------------------------------------
# get()
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
@patch("nodriver.start")
async def test_get_converts_page(mock_start):
    html = (FIXTURES_DIR / "match_finished_bo3.html").read_text(encoding="utf-8")
    mock_start.return_value = _mock_browser(_mock_page(html=html))

    async with HLTVClient(_make_config()) as client:
        page = await client.get(get_match(2346065))

    assert page.id == 2346065
    assert page.status is MatchStatus.FINISHED


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_get_saves_snapshot(mock_start, tmp_path):
    html = (FIXTURES_DIR / "team_five.html").read_text(encoding="utf-8")
    mock_start.return_value = _mock_browser(_mock_page(html=html))
    store = SnapshotStore(tmp_path)

    async with HLTVClient(_make_config(), store=store) as client:
        await client.get(get_team(6665))

    assert store.load("team", 6665) == html


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_save_html_config_creates_store(mock_start, tmp_path):
    mock_start.return_value = _mock_browser(_mock_page(html="<html><body></body></html>"))

    config = _make_config(save_html=True, data_dir=str(tmp_path))
    async with HLTVClient(config) as client:
        assert await client.get(upcoming().top_tier().build()) == []

    assert SnapshotStore(tmp_path).exists("upcoming", "predefinedFilter=top_tier")


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_conversion_error_not_retried(mock_start):
    page = _mock_page(html="<html><body>wrong page</body></html>")
    mock_start.return_value = _mock_browser(page)

    async with HLTVClient(_make_config(max_retries=3)) as client:
        with pytest.raises(StructureNotFound):
            await client.get(get_match(1))

    assert page.get.call_count == 1
    assert client.stats["pages"] == {"match": {"convert_failed": 1}}


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_outcomes_tallied_per_kind(mock_start, caplog):
    html = (FIXTURES_DIR / "team_five.html").read_text(encoding="utf-8")
    page = _mock_page(html=html)
    mock_start.return_value = _mock_browser(page)

    client = HLTVClient(_make_config(max_retries=1))
    await client.start()
    await client.get(get_team(6665))
    await client.get(get_team(9565))
    page.get = AsyncMock(side_effect=RuntimeError("tab crashed"))
    with pytest.raises(HLTVFetchError):
        await client.get(get_match(1))

    assert client.stats["pages"] == {
        "team": {"converted": 2},
        "match": {"fetch_failed": 1},
    }
    with caplog.at_level(logging.INFO):
        await client.close()
    assert "team pages: 2 converted, 0 fetch failures" in caplog.text


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_navigation_error_backs_off(mock_start):
    page = _mock_page()
    mock_start.return_value = _mock_browser(page)

    client = HLTVClient(_make_config(max_retries=1))
    await client.start()
    page.get = AsyncMock(side_effect=RuntimeError("boom"))
    client.rate_limiter.backoff = MagicMock()

    with pytest.raises(HLTVFetchError):
        await client.fetch("https://www.hltv.org/test")
    await client.close()

    client.rate_limiter.backoff.assert_called_once()
    assert "RuntimeError" in client.rate_limiter.backoff.call_args.args[0]


def test_snapshot_key():
    assert snapshot_key(get_match(2346065)) == "2346065"
    assert snapshot_key(get_team(6665)) == "6665"
    assert snapshot_key(results().stars(1).build()) == "stars=1&matchType=All"


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
@patch("nodriver.start")
async def test_async_context_manager(mock_start):
    browser = _mock_browser()
    mock_start.return_value = browser

    async with HLTVClient(_make_config()) as client:
        assert client._browser is not None
        assert client._tab is not None

    browser.stop.assert_called_once()
    assert client._browser is None
    assert client._tab is None


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_close_idempotent(mock_start):
    browser = _mock_browser()
    mock_start.return_value = browser

    client = HLTVClient(_make_config())
    await client.start()
    await client.close()
    await client.close()

    browser.stop.assert_called_once()


@pytest.mark.asyncio
@patch("nodriver.start")
async def test_warmup_continues_when_challenge_persists(mock_start, caplog):
    mock_start.return_value = _mock_browser(_mock_page(title="Just a moment..."))

    client = HLTVClient(_make_config())
    await client.start()
    await client.close()

    assert "did not clear" in caplog.text


def test_max_retries_patched_from_config():
    HLTVClient(_make_config(max_retries=7))
    assert HLTVClient.fetch.retry.stop.max_attempt_number == 7
