"""
Web Scraping Example

Fetch pages as parsed documents and extract links.
"""

import logging
from typing import List

from http_oneshot import CancelContext, Request, RequestConfig, ResponseType

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class LinkScraper:
    """Collects links from pages within one overall deadline."""

    def __init__(self, deadline: float = 30.0):
        self.config = RequestConfig.create(
            headers={"User-Agent": "LinkScraper/1.0 (Educational Example)"},
        )
        self.ctx = CancelContext.with_timeout(deadline)

    def links(self, url: str) -> List[str]:
        request = Request("GET", url, config=self.config)
        request.response_type = ResponseType.DOCUMENT
        outcome = request.send(ctx=self.ctx)

        if not outcome.ok:
            logger.warning("Failed %s: %s", url, outcome.error)
            return []
        if not outcome.response.is_2xx() or outcome.response.body is None:
            logger.warning("Skipped %s: status %s", url, outcome.response.status)
            return []

        return [a["href"] for a in outcome.response.body.find_all("a", href=True)]

    def close(self):
        self.ctx.cancel()


if __name__ == "__main__":
    scraper = LinkScraper()
    try:
        for link in scraper.links("https://example.com/"):
            print(link)
    finally:
        scraper.close()
