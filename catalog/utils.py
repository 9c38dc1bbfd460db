"""Fetch helpers for storefront pages served over HTTP."""

import logging

import requests

logger = logging.getLogger(__name__)

# Hosted storefronts send a stripped page without cards to clients that do not look like a browser
PAGE_HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0",
    "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.5",
    "Accept-Language": "en;q=0.8",
}
TIMEOUT_SECONDS = 10


def safe_get(url, params=None):
    """Download the storefront page at *url* as HTML.

    A page that cannot be reached reads as an empty catalog, so errors are
    logged and ``""`` is returned.
    """
    try:
        response = requests.get(url, params=params, headers=PAGE_HEADERS, timeout=TIMEOUT_SECONDS)
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Storefront fetch of %s failed: %s", url, exc)
        return ""
    return response.text


def render_page(url, wait_selector=None):
    """Return the HTML of *url* after client-side scripts have run.

    Playwright drives a headless Chromium so cards injected by page scripts are
    present. When the browser cannot start or the page times out we fall back
    to a plain :func:`safe_get`.
    """
    from playwright.sync_api import sync_playwright

    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True)
            try:
                page = browser.new_page(extra_http_headers=PAGE_HEADERS)
                page.goto(url, timeout=TIMEOUT_SECONDS * 1000)
                if wait_selector:
                    page.wait_for_selector(wait_selector, timeout=TIMEOUT_SECONDS * 1000)
                return page.content()
            finally:
                browser.close()
    except Exception:
        logger.warning("Playwright render failed for %s; using plain fetch", url)
        return safe_get(url)
