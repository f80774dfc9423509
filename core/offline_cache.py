"""Offline cache policy of the POS web app and the service worker that implements it.

The browser runs ``sw.js``; this module holds the single definition of its
cache name and pre-cached assets, renders the script from them, and models
the same install / activate / fetch policy over a ``CacheStorage`` so the
behavior can be checked without a browser.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from string import Template
from typing import Callable

import httpx

logger = logging.getLogger(__name__)

CACHE_NAME = "emprende-venta-pos-cache-v-final2"

PRECACHE_URLS: tuple[str, ...] = (
    "./",
    "./index.html",
    "./manifest.webmanifest",
    "./logo.png",
    "./icons/icon-192.png",
    "./icons/icon-512.png",
)

OFFLINE_FALLBACK = "./index.html"

NETWORK_ERRORS = (OSError, httpx.TransportError)

Fetcher = Callable[[str], httpx.Response]


class CacheStorage(ABC):
    """The subset of the browser CacheStorage API the worker relies on."""

    @abstractmethod
    def put(self, cache_name: str, url: str, response: httpx.Response) -> None:
        ...

    @abstractmethod
    def match(self, url: str) -> httpx.Response | None:
        """Look ``url`` up across every cache, oldest cache first."""

    @abstractmethod
    def keys(self) -> list[str]:
        ...

    @abstractmethod
    def delete(self, cache_name: str) -> bool:
        ...


class InMemoryCacheStorage(CacheStorage):
    def __init__(self) -> None:
        self._caches: dict[str, dict[str, httpx.Response]] = {}

    def put(self, cache_name: str, url: str, response: httpx.Response) -> None:
        self._caches.setdefault(cache_name, {})[url] = response

    def match(self, url: str) -> httpx.Response | None:
        for entries in self._caches.values():
            if url in entries:
                return entries[url]
        return None

    def keys(self) -> list[str]:
        return list(self._caches)

    def delete(self, cache_name: str) -> bool:
        return self._caches.pop(cache_name, None) is not None


class OfflineCache:
    """Cache-first, network-second, cached index page as last resort."""

    def __init__(
        self,
        storage: CacheStorage,
        cache_name: str = CACHE_NAME,
        urls: tuple[str, ...] = PRECACHE_URLS,
        fallback_url: str = OFFLINE_FALLBACK,
    ) -> None:
        self.storage = storage
        self.cache_name = cache_name
        self.urls = urls
        self.fallback_url = fallback_url

    def install(self, fetch: Fetcher) -> bool:
        """Pre-cache every asset, all or nothing. Failures are swallowed."""
        fetched: list[tuple[str, httpx.Response]] = []
        for url in self.urls:
            try:
                resp = fetch(url)
            except NETWORK_ERRORS as e:
                logger.warning("Pre-cache skipped, fetching %s failed: %s", url, e)
                return False
            if not resp.is_success:
                logger.warning("Pre-cache skipped, %s returned %d", url, resp.status_code)
                return False
            fetched.append((url, resp))

        for url, resp in fetched:
            self.storage.put(self.cache_name, url, resp)
        logger.info("Pre-cached %d assets into %s", len(fetched), self.cache_name)
        return True

    def activate(self) -> list[str]:
        """Drop caches left by previous versions; returns their names."""
        stale = [name for name in self.storage.keys() if name != self.cache_name]
        for name in stale:
            self.storage.delete(name)
        if stale:
            logger.info("Deleted stale caches: %s", ", ".join(stale))
        return stale

    def respond(self, url: str, fetch: Fetcher) -> httpx.Response | None:
        cached = self.storage.match(url)
        if cached is not None:
            return cached
        try:
            return fetch(url)
        except NETWORK_ERRORS:
            logger.debug("Network unavailable for %s, serving %s", url, self.fallback_url)
            return self.storage.match(self.fallback_url)


SERVICE_WORKER_TEMPLATE = Template("""\
// sw.js (safe cache for Live Server and prod)
const CACHE_NAME = $cache_name;
const urlsToCache = $urls;
self.addEventListener('install', (event) => {
  event.waitUntil(caches.open(CACHE_NAME).then((cache) => cache.addAll(urlsToCache)).catch(()=>{}));
});
self.addEventListener('activate', (event) => {
  event.waitUntil(caches.keys().then((keys) => Promise.all(keys.map((k) => k !== CACHE_NAME && caches.delete(k)))));
});
self.addEventListener('fetch', (event) => {
  const req = event.request;
  event.respondWith(
    caches.match(req).then((cached) => cached || fetch(req).catch(()=>caches.match($fallback)))
  );
});
""")


def render_service_worker(
    cache_name: str = CACHE_NAME,
    urls: tuple[str, ...] = PRECACHE_URLS,
    fallback_url: str = OFFLINE_FALLBACK,
) -> str:
    """Browser script implementing the same policy as ``OfflineCache``."""
    return SERVICE_WORKER_TEMPLATE.substitute(
        cache_name=json.dumps(cache_name),
        urls=json.dumps(list(urls), indent=2),
        fallback=json.dumps(fallback_url),
    )
