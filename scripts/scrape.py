#!/usr/bin/env python3
"""Scrape a product page from the command line, printing the JSON outcome"""
import asyncio
import json
import sys

from scrape_runner.errors import LaunchError
from scrape_runner.fallback import scrape_with_fallback
from scrape_runner.proxies import build_candidates, resolve_proxy_list


def scrape_url(url, proxies=None):
    """
    Run the fallback chain once and return the response payload

    Args:
        url: Product page URL
        proxies: Proxy URLs tried after the direct attempt (None = PROXY_LIST env)
    """
    candidates = build_candidates(resolve_proxy_list(proxies))
    try:
        outcome = asyncio.run(scrape_with_fallback(url, candidates, request_id='cli'))
    except LaunchError as e:
        return {'success': False, 'attemptInfo': [], 'error': e.reason}
    return outcome.to_dict()


if __name__ == '__main__':
    if len(sys.argv) < 2:
        print(json.dumps({
            'error': 'Usage: scrape.py <url> [proxy_url ...]',
            'success': False
        }))
        sys.exit(1)

    url = sys.argv[1]
    proxies = sys.argv[2:] or None

    payload = scrape_url(url, proxies)
    print(json.dumps(payload, indent=2))
    sys.exit(0 if payload.get('success') else 2)
