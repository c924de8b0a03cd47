"""
Web page fetching and recipe content discovery.

fetch_page_html() is the default page fetcher collaborator used for URL
sources. find_jsonld_recipe() and extract_main_text() work on the returned
HTML without any network access.
"""
from __future__ import annotations

import ipaddress
import json
import logging
import time
from typing import Any
from urllib.parse import urlparse

import cloudscraper
import requests
from bs4 import BeautifulSoup

from ..const import DEFAULT_MAX_REDIRECTS, DEFAULT_MAX_RESPONSE_SIZE, DEFAULT_MAX_TEXT_LENGTH, DEFAULT_TIMEOUT

_LOGGER = logging.getLogger(__name__)


def validate_url(url: str) -> None:
    """Reject non-HTTP(S) URLs and literal internal IP addresses.

    Raises:
        ValueError: If the URL must not be fetched
    """
    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https'):
        raise ValueError("Only HTTP/HTTPS protocols allowed")
    if not parsed.hostname:
        raise ValueError("URL has no host")

    try:
        ip = ipaddress.ip_address(parsed.hostname)
    except ValueError:
        return  # Hostname is not an IP

    if ip.is_private or ip.is_loopback or ip.is_link_local:
        raise ValueError("Cannot access internal IP addresses")


def _fetch_with_retry(session: requests.Session, url: str, max_retries: int = 3) -> bytes:
    """Fetch URL with exponential backoff retry logic.

    Args:
        session: Requests session to use
        url: URL to fetch
        max_retries: Maximum number of retry attempts

    Returns:
        Response content as bytes

    Raises:
        requests.exceptions.RequestException: If all retries fail
        ValueError: If response is too large or invalid content type
    """
    for attempt in range(max_retries):
        try:
            _LOGGER.debug("Fetching %s (attempt %d/%d)",
                          url, attempt + 1, max_retries)
            # Use stream=True to check headers before downloading
            response = session.get(
                url,
                timeout=DEFAULT_TIMEOUT,
                allow_redirects=True,
                stream=True
            )
            response.raise_for_status()

            content_type = response.headers.get('content-type', '').lower()
            if not ('text/html' in content_type or 'application/xhtml' in content_type
                    or 'application/xml' in content_type):
                _LOGGER.warning(
                    "Invalid content type for %s: %s", url, content_type)
                raise ValueError(
                    f"Invalid content type: {content_type}. Only HTML/XHTML content is allowed.")

            content_length = response.headers.get('content-length')
            if content_length and int(content_length) > DEFAULT_MAX_RESPONSE_SIZE:
                _LOGGER.warning(
                    "Response too large for %s: %s bytes", url, content_length)
                raise ValueError(
                    f"Response size ({content_length} bytes) exceeds maximum allowed size "
                    f"({DEFAULT_MAX_RESPONSE_SIZE} bytes)")

            # Download content with size limit enforcement
            content = b''
            for chunk in response.iter_content(chunk_size=8192):
                content += chunk
                if len(content) > DEFAULT_MAX_RESPONSE_SIZE:
                    _LOGGER.warning(
                        "Response exceeded size limit while downloading from %s", url)
                    raise ValueError(
                        f"Response size exceeds maximum allowed size ({DEFAULT_MAX_RESPONSE_SIZE} bytes)")

            return content
        except requests.exceptions.HTTPError as e:
            if e.response is not None and e.response.status_code == 403 and attempt < max_retries - 1:
                wait_time = 2 ** attempt
                _LOGGER.warning(
                    "Got 403 for %s, retrying after %ds", url, wait_time)
                time.sleep(wait_time)
                continue
            raise
        except requests.exceptions.RequestException as e:
            if attempt < max_retries - 1:
                wait_time = 2 ** attempt
                _LOGGER.warning(
                    "Error fetching %s: %s, retrying after %ds", url, e, wait_time)
                time.sleep(wait_time)
                continue
            raise

    raise requests.exceptions.RequestException(
        f"Failed to fetch {url} after {max_retries} attempts")


def fetch_page_html(url: str) -> str:
    """Download a recipe page.

    Args:
        url: The URL of the recipe website

    Returns:
        The page HTML

    Raises:
        requests.exceptions.RequestException: If fetching fails
        ValueError: If the URL is invalid or the response is not acceptable HTML
    """
    if not url or not url.strip():
        raise ValueError("URL cannot be empty")
    validate_url(url)

    _LOGGER.info("Fetching recipe page %s", url)

    # Use cloudscraper for better anti-bot protection
    session = cloudscraper.create_scraper(
        browser={
            'browser': 'chrome',
            'platform': 'windows',
            'desktop': True
        }
    )
    session.max_redirects = DEFAULT_MAX_REDIRECTS

    try:
        html = _fetch_with_retry(session, url)
    except requests.exceptions.RequestException as e:
        _LOGGER.error("Failed to fetch %s: %s", url, str(e))
        raise

    _LOGGER.debug("Fetched %d bytes from %s", len(html), url)
    return html.decode('utf-8', errors='replace')


def _is_recipe(item: Any) -> bool:
    """Check if a JSON-LD item represents a Recipe."""
    if not isinstance(item, dict):
        return False
    item_type = item.get('@type')
    if isinstance(item_type, str):
        return item_type == 'Recipe'
    elif isinstance(item_type, list):
        return 'Recipe' in item_type
    return False


def find_jsonld_recipe(html: str) -> dict[str, Any] | None:
    """Find the first Schema.org Recipe object in the page's JSON-LD scripts.

    Handles a single object, a top-level list, and @graph containers.

    Args:
        html: Page HTML

    Returns:
        The decoded Recipe object, or None if the page has none
    """
    soup = BeautifulSoup(html, features="html.parser")
    json_lds = soup.find_all('script', type='application/ld+json')
    _LOGGER.debug("Found %d JSON-LD scripts", len(json_lds))

    for idx, json_ld in enumerate(json_lds):
        if not json_ld.string:
            continue
        try:
            parsed_data = json.loads(json_ld.string)
        except json.JSONDecodeError as e:
            _LOGGER.debug("Failed to parse JSON-LD script %d: %s", idx, e)
            continue

        candidates = []
        if isinstance(parsed_data, list):
            candidates = parsed_data
        elif isinstance(parsed_data, dict):
            graph = parsed_data.get('@graph')
            candidates = graph if isinstance(graph, list) else [parsed_data]

        data = next((item for item in candidates if _is_recipe(item)), None)
        if data:
            _LOGGER.debug("Found recipe data in JSON-LD script %d", idx)
            return data

    return None


def extract_main_text(html: str, max_length: int = DEFAULT_MAX_TEXT_LENGTH) -> str:
    """Extract the readable recipe text from a page without structured data.

    Args:
        html: Page HTML
        max_length: Text is truncated to this many characters

    Returns:
        Cleaned page text, one block per line
    """
    soup = BeautifulSoup(html, features="html.parser")

    # Look for common recipe container elements
    recipe_container = None
    for selector in ['[itemtype*="Recipe"]', '.recipe', '#recipe', 'article', 'main']:
        recipe_container = soup.select_one(selector)
        if recipe_container:
            _LOGGER.debug("Using recipe container %s", selector)
            break

    if recipe_container:
        soup = recipe_container

    for element in soup(["script", "style", "nav", "header", "footer", "aside",
                         "iframe", "noscript", "svg", "form", "button"]):
        element.extract()

    patterns_to_remove = ['advertisement', 'social-share', 'comment',
                          'navigation', 'sidebar', 'newsletter',
                          'cookie-banner', 'popup', 'modal']
    if not recipe_container:
        patterns_to_remove.extend(['related', 'recommendation'])

    for pattern in patterns_to_remove:
        for element in soup.find_all(class_=lambda x: x and pattern in x.lower()):
            element.extract()
        for element in soup.find_all(id=lambda x: x and pattern in x.lower()):
            element.extract()

    text = soup.get_text(separator='\n')

    lines = (line.strip() for line in text.splitlines())
    chunks = (phrase.strip() for line in lines for phrase in line.split("  "))
    text = '\n'.join(chunk for chunk in chunks if chunk)

    if len(text) > max_length:
        _LOGGER.debug("Truncating text from %d to %d characters",
                      len(text), max_length)
        text = text[:max_length]

    _LOGGER.info("Extracted %d characters of page text", len(text))
    return text


def extract_caption_text(html: str) -> str:
    """Collect the post caption of a social video page.

    Video pages rarely carry recipe markup, but the caption (exposed through
    Open Graph/Twitter meta tags or a VideoObject description) often lists
    the ingredients.

    Args:
        html: Page HTML

    Returns:
        Caption text, or an empty string if none was found
    """
    soup = BeautifulSoup(html, features="html.parser")
    captions = []

    for attrs in ({'property': 'og:description'}, {'name': 'description'},
                  {'name': 'twitter:description'}):
        tag = soup.find('meta', attrs=attrs)
        content = tag.get('content', '').strip() if tag else ''
        if content and content not in captions:
            captions.append(content)

    for json_ld in soup.find_all('script', type='application/ld+json'):
        try:
            data = json.loads(json_ld.string or '')
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict) and data.get('@type') == 'VideoObject':
            description = str(data.get('description') or '').strip()
            if description and description not in captions:
                captions.append(description)

    # the longest caption is usually the untruncated one
    captions.sort(key=len, reverse=True)
    text = captions[0] if captions else ''
    _LOGGER.debug("Extracted %d characters of caption text", len(text))
    return text
