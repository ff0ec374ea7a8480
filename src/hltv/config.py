"""Fetcher configuration with defaults tuned for HLTV."""

from dataclasses import dataclass

HLTV_BASE_URL = "https://www.hltv.org"


@dataclass
class ClientConfig:
    """Configuration for HLTVClient.

    All timing values are in seconds. The converters take no configuration;
    everything here concerns fetching and snapshot capture.
    """

    # Rate limiting: delay between requests
    min_delay: float = 1.0
    max_delay: float = 5.0

    # Adaptive backoff on challenge/error
    backoff_factor: float = 2.0

    # Gradual recovery on success (multiply current delay by this)
    recovery_factor: float = 0.85

    # Maximum delay ceiling
    max_backoff: float = 30.0

    # tenacity stop_after_attempt
    max_retries: int = 5

    # Wait after navigation before the first DOM checks
    page_load_wait: float = 0.4

    # Seconds to poll for a Cloudflare challenge to clear
    challenge_wait: float = 90.0

    # asyncio.wait_for around tab.get()
    navigation_timeout: float = 30.0

    base_url: str = HLTV_BASE_URL

    # Logs and snapshots live under data_dir
    data_dir: str = "data"

    # Save every fetched page under {data_dir}/snapshots/
    save_html: bool = False
