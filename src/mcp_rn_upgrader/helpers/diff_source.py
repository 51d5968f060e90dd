"""Upgrade diff fetcher for the rn-diff-purge repository.

Diffs are plain text served from GitHub:
GET https://raw.githubusercontent.com/react-native-community/rn-diff-purge/diffs/diffs/{from}..{to}.diff

Fetched diffs are cached for the lifetime of the process.
"""

import logging
from typing import Any

import requests

from .config_loader import get_upgrade_config

logger = logging.getLogger(__name__)

_diff_cache: dict[str, str] = {}


class DiffFetchError(Exception):
    """Raised when the upgrade diff cannot be fetched."""


def cache_key(from_version: str, to_version: str) -> str:
    return f"{from_version}..{to_version}"


def clear_cache() -> None:
    """Drop all cached diffs."""
    _diff_cache.clear()


def fetch_diff(from_version: str, to_version: str, config: dict[str, Any] | None = None) -> str:
    """Fetch the unified diff between two React Native versions.

    Args:
        from_version: Current React Native version (e.g. '0.72.4')
        to_version: Target React Native version
        config: Server configuration; 'upgrade' section supplies URL and timeout

    Returns:
        The full diff text

    Raises:
        DiffFetchError: If the request fails or returns a non-2xx status
    """
    key = cache_key(from_version, to_version)
    cached = _diff_cache.get(key)
    if cached is not None:
        return cached

    upgrade = get_upgrade_config(config)
    url = upgrade["diff_url_template"].format(from_version=from_version, to_version=to_version)

    try:
        response = requests.get(url, timeout=upgrade["request_timeout"])
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error("Fetch error for %s: %s", url, e)
        raise DiffFetchError(f"Failed to fetch upgrade diff {key}: {e}") from e

    _diff_cache[key] = response.text
    return response.text
