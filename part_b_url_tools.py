#!/usr/bin/env python3
"""
part_b_url_tools.py

URL helpers: validation, scheme formatting and display shortening, plus a
batch front-end (`manage_urls`) that applies one action to a list of URLs.

Usage:
    python part_b_url_tools.py --action checkValid example.com https://example.com
    python part_b_url_tools.py --action shorten --length 20 https://example.com/a/very/long/path
"""

from __future__ import annotations
import argparse
import logging
from typing import List, Optional, Sequence

# Configuration
DEFAULT_SHORTEN_LENGTH = 30
SCHEMES = ("http://", "https://")
DEFAULT_SCHEME = "https://"

ACTION_CHECK_VALID = "checkValid"
ACTION_FORMAT = "format"
ACTION_SHORTEN = "shorten"
ACTIONS = (ACTION_CHECK_VALID, ACTION_FORMAT, ACTION_SHORTEN)

logger = logging.getLogger("UrlTools")


def _strip_scheme(url: str) -> Optional[str]:
    for scheme in SCHEMES:
        if url.startswith(scheme):
            return url[len(scheme):]
    return None


def is_valid_url(url: Optional[str]) -> bool:
    """
    Minimal URL check.

    True iff the URL starts with http:// or https://, has at least one
    character after the scheme and that remainder contains a dot.
    """
    if url is None:
        return False
    rest = _strip_scheme(url)
    if not rest:
        return False
    return "." in rest


def format_url(url: Optional[str]) -> Optional[str]:
    """Prefix https:// when the URL carries no http/https scheme."""
    if url is None:
        return None
    if _strip_scheme(url) is None:
        return DEFAULT_SCHEME + url
    return url


def shorten_url(url: Optional[str], length: int = DEFAULT_SHORTEN_LENGTH) -> Optional[str]:
    """
    Truncate for display: the first `length` characters followed by "..." when
    the URL is longer than `length`, otherwise the URL unchanged.

    A negative length behaves like 0.
    """
    if url is None:
        return None
    length = max(0, int(length))
    if len(url) > length:
        return url[:length] + "..."
    return url


def manage_urls(urls: Sequence[Optional[str]], action: str,
                length: int = DEFAULT_SHORTEN_LENGTH) -> List[Optional[str]]:
    """
    Apply one action to every URL of a batch.

    Args:
        urls: URLs to process; None entries are kept as None in the result.
        action: "checkValid", "format" or "shorten" (case-sensitive).
        length: truncation length for "shorten".

    Returns:
        List aligned with `urls`. For "checkValid" each entry is "1" or "0".

    Raises:
        ValueError: empty batch or unknown action.
    """
    if urls is None or len(urls) == 0:
        raise ValueError("No URLs to process")
    if action not in ACTIONS:
        raise ValueError(f"Unknown action: {action!r} (expected one of {', '.join(ACTIONS)})")

    results: List[Optional[str]] = []
    for url in urls:
        if url is None:
            results.append(None)
        elif action == ACTION_CHECK_VALID:
            results.append("1" if is_valid_url(url) else "0")
        elif action == ACTION_FORMAT:
            results.append(format_url(url))
        else:
            results.append(shorten_url(url, length))
    logger.debug("Processed %d URL(s) with action %s", len(results), action)
    return results


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    parser = argparse.ArgumentParser(description="Part B: URL validation, formatting and shortening")
    parser.add_argument("urls", nargs="+", help="URLs to process")
    parser.add_argument("--action", default=ACTION_CHECK_VALID, help="checkValid, format or shorten")
    parser.add_argument("--length", type=int, default=DEFAULT_SHORTEN_LENGTH, help="Length used by shorten")
    args = parser.parse_args(argv)

    try:
        results = manage_urls(args.urls, args.action, args.length)
    except ValueError as e:
        logger.error("%s", e)
        return 2
    for url, result in zip(args.urls, results):
        print(f"{url} -> {result}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
