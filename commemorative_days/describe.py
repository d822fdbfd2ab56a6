# -*- coding: utf-8 -*-
"""
Best-effort descriptions for rules that only carry a ``descriptionURL``.

The page is fetched with requests, reduced to its main text block with
BeautifulSoup, whitespace-collapsed and truncated.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Dict, Optional, Protocol

import requests
from bs4 import BeautifulSoup

from .exceptions import DescriptionFetchError

logger = logging.getLogger(__name__)

MAX_DESCRIPTION_CHARS = 1000
MIN_CONTENT_CHARS = 100
CONTENT_SELECTORS = ("article", "main", ".content", "#content", "body")
NOISE_TAGS = ("script", "style", "nav", "header", "footer")


class DescriptionProvider(Protocol):
    def fetch_text(self, url: str) -> str:
        ...


def normalize_whitespace(s: str) -> str:
    return re.sub(r"\s+", " ", s).strip()


def truncate(text: str, limit: int = MAX_DESCRIPTION_CHARS) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def html_to_text(html: str) -> str:
    """
    Text of the first content block holding more than ``MIN_CONTENT_CHARS``
    characters, trying ``CONTENT_SELECTORS`` in order. Scripts, styles and
    page chrome are removed first.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(list(NOISE_TAGS)):
        tag.decompose()

    content = ""
    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is None:
            continue
        text = normalize_whitespace(element.get_text(" "))
        if text:
            content = text
        if len(text) > MIN_CONTENT_CHARS:
            break

    if not content:
        content = normalize_whitespace(soup.get_text(" "))
    return content


class WebDescriptionProvider:
    """
    Fetches description text over HTTP.

    Requests are spaced at least ``min_interval`` seconds apart and results
    are kept per URL for the lifetime of the instance, so a long year range
    hits each page once. Instances are callable and can be passed straight
    to ``events_for_month(..., describe=provider)``.
    """

    def __init__(
        self,
        timeout: float = 10,
        min_interval: float = 1.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.min_interval = min_interval
        self.session = session if session is not None else requests.Session()
        self._seen: Dict[str, str] = {}
        self._failed: Dict[str, DescriptionFetchError] = {}
        self._last_request: Optional[float] = None

    def __call__(self, url: str) -> str:
        return self.fetch_text(url)

    def _wait_turn(self) -> None:
        if self._last_request is not None:
            remaining = self.min_interval - (time.monotonic() - self._last_request)
            if remaining > 0:
                time.sleep(remaining)
        self._last_request = time.monotonic()

    def fetch_text(self, url: str) -> str:
        if url in self._seen:
            return self._seen[url]
        if url in self._failed:
            raise self._failed[url]

        self._wait_turn()
        logger.debug("Fetching description from %s", url)
        try:
            r = self.session.get(url, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            self._failed[url] = DescriptionFetchError(f"{url}: {e}")
            raise self._failed[url] from e

        content_type = r.headers.get("content-type", "")
        if "text" not in content_type:
            self._failed[url] = DescriptionFetchError(
                f"{url}: non-text content ({content_type or 'unknown'})"
            )
            raise self._failed[url]

        if "html" in content_type:
            text = html_to_text(r.text)
        else:
            text = normalize_whitespace(r.text)

        text = truncate(text)
        self._seen[url] = text
        return text
