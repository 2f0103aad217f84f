"""URL submission: rate-check, fetch, extract, and store."""

import logging

from universal_api.exceptions import InvalidRequest, RateLimitExceeded
from universal_api.parser.base import CanonicalDocument
from universal_api.pipeline import Fetcher, extract_url
from universal_api.ratelimit import DomainRateLimiter
from universal_api.storage import Storage

logger = logging.getLogger(__name__)


class SubmissionService:
    """Scrapes submitted documentation URLs into a store."""

    def __init__(
        self,
        fetcher: Fetcher,
        storage: Storage,
        limiter: DomainRateLimiter | None = None,
        fallback: bool = False,
    ):
        self.fetcher = fetcher
        self.storage = storage
        self.limiter = limiter
        self.fallback = fallback

    def submit(self, url: str, description: str = "") -> CanonicalDocument:
        """Scrape ``url`` and save the result.

        Raises:
            InvalidRequest: If ``url`` is empty.
            RateLimitExceeded: If the URL's domain was submitted too recently.
        """
        url = url.strip()
        if not url:
            raise InvalidRequest("URL is required")
        if self.limiter is not None and not self.limiter.allow(url):
            logger.warning("Rate limit exceeded for %s", url)
            raise RateLimitExceeded(f"Too many requests for this domain, try again later: {url}")

        doc = extract_url(url, self.fetcher, description=description, fallback=self.fallback)
        self.storage.save(doc)
        logger.info("Stored %s (%d endpoints) from %s", doc.id, len(doc.endpoints), url)
        return doc

    def get(self, doc_id: str) -> CanonicalDocument:
        return self.storage.get(doc_id)

    def list_all(self) -> list[CanonicalDocument]:
        return self.storage.list_all()
