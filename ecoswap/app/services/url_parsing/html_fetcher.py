"""HTML fetching and URL validation utilities."""

import ipaddress
import logging
import re
from typing import Optional
from urllib.parse import urlparse

import httpx

from ecoswap.app.services.url_parsing.models import UrlValidation

logger = logging.getLogger(__name__)

MAX_REDIRECTS = 5


def is_private_host(host: str) -> bool:
    """Check if a host is private/localhost."""
    hostname = host.split(":")[0]
    try:
        ip = ipaddress.ip_address(hostname)
        return ip.is_private or ip.is_loopback
    except ValueError:
        return hostname.lower() in {"localhost"}


def validate_recipe_url(url: Optional[str]) -> UrlValidation:
    """Check that a URL is a well-formed public http(s) address."""
    if not url:
        return UrlValidation(valid=False, error="Recipe URL is required.")
    try:
        parsed = urlparse(url)
    except ValueError:
        return UrlValidation(valid=False, error="Invalid URL format.")
    if parsed.scheme not in {"http", "https"}:
        return UrlValidation(valid=False, error="Invalid protocol. Use HTTP or HTTPS.")
    hostname = parsed.hostname or ""
    if len(hostname) < 3:
        return UrlValidation(valid=False, error="Invalid hostname.")
    if is_private_host(hostname):
        return UrlValidation(valid=False, error="Host is blocked (localhost/private).")
    return UrlValidation(valid=True)


def _decode(response: httpx.Response) -> str:
    content_type = response.headers.get("content-type", "")
    encoding = None
    if "charset=" in content_type.lower():
        try:
            encoding = content_type.split("charset=")[1].split(";")[0].strip().strip("\"'")
        except (IndexError, AttributeError):
            pass

    content_bytes = response.content
    try:
        return content_bytes.decode(encoding or "utf-8")
    except (UnicodeDecodeError, LookupError):
        text = content_bytes.decode("utf-8", errors="replace")
        encoding_match = re.search(r'<meta[^>]+charset=["\']?([^"\'>\s]+)', text, re.I)
        if encoding_match:
            detected_encoding = encoding_match.group(1).lower()
            if detected_encoding and detected_encoding != "utf-8":
                try:
                    return content_bytes.decode(detected_encoding)
                except (UnicodeDecodeError, LookupError):
                    pass
        return text


async def fetch_html(
    url: str,
    timeout: float,
    user_agent: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Fetch page markup with a plain GET; no JavaScript is executed."""
    validation = validate_recipe_url(url)
    if not validation.valid:
        raise ValueError(validation.error)

    headers = {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
    }
    client_timeout = httpx.Timeout(timeout, connect=min(timeout, 5.0))

    async with httpx.AsyncClient(
        timeout=client_timeout,
        follow_redirects=True,
        max_redirects=MAX_REDIRECTS,
        headers=headers,
        transport=transport,
    ) as client:
        response = await client.get(url)
    response.raise_for_status()

    content_type = response.headers.get("content-type", "")
    if content_type and "html" not in content_type and "text/plain" not in content_type:
        raise ValueError(f"Unsupported content type: {content_type}")

    text = _decode(response)
    logger.info("Fetched %d chars from %s (status=%s)", len(text), url, response.status_code)
    return text
