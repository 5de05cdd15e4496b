from .fetcher import BROWSER_HEADERS, HttpxPageFetcher, build_http_client

__all__ = ["BROWSER_HEADERS", "HttpxPageFetcher", "build_http_client"]
