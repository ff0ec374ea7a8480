"""HLTV page converters and fetcher.

Turns HLTV match, results, upcoming and team pages into validated domain
records. The converters are pure and work on already-downloaded HTML; the
browser-backed fetcher lives in ``hltv.http_client``.
"""

__version__ = "0.1.0"
