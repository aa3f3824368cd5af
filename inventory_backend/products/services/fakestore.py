# products/services/fakestore.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from django.conf import settings

logger = logging.getLogger(__name__)

FAKESTORE_DEFAULT_URL = "https://fakestoreapi.com/products"
USER_AGENT = "InventoryBackend/1.0"


@dataclass(frozen=True)
class FakeStoreProduct:
    id: Any = None
    title: Optional[str] = None
    price: Any = None
    category: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None

    @classmethod
    def from_payload(cls, item: dict) -> "FakeStoreProduct":
        return cls(
            id=item.get("id"),
            title=item.get("title"),
            price=item.get("price"),
            category=item.get("category"),
            description=item.get("description"),
            image=item.get("image"),
        )


def _fakestore_cfg() -> dict:
    cfg = getattr(settings, "FAKESTORE", {}) or {}
    return cfg if isinstance(cfg, dict) else {}


class FakeStoreClient:
    """
    Read-only client for the FakeStore product catalog.

    Every failure (HTTP status, network, timeout, bad JSON) is logged and
    turned into an empty list. Callers treat "nothing fetched" and
    "upstream down" the same way.
    """

    def __init__(self, *, api_url: str | None = None, timeout: int | None = None):
        cfg = _fakestore_cfg()
        self.api_url = (api_url or cfg.get("API_URL") or FAKESTORE_DEFAULT_URL).strip()
        self.timeout = timeout if timeout is not None else int(cfg.get("TIMEOUT_SECONDS") or 10)

    def _fetch_raw(self) -> str:
        req = Request(
            self.api_url,
            headers={
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            },
            method="GET",
        )
        with urlopen(req, timeout=self.timeout) as resp:
            return resp.read().decode("utf-8", errors="replace")

    def get_all_products(self) -> list[FakeStoreProduct]:
        logger.info("Fetching products from FakeStore", extra={"url": self.api_url})

        try:
            raw = self._fetch_raw()
        except HTTPError as e:
            logger.error(
                "FakeStore returned an error status",
                extra={"status": e.code, "reason": str(e.reason)},
            )
            return []
        except URLError as e:
            logger.error("FakeStore unreachable", extra={"reason": str(e.reason)})
            return []
        except (TimeoutError, OSError) as e:
            logger.error("FakeStore request failed", extra={"reason": str(e)})
            return []

        try:
            body = json.loads(raw)
        except ValueError:
            logger.error("FakeStore returned non-JSON body")
            return []

        if not isinstance(body, list) or not body:
            logger.warning("FakeStore response is empty or not a list")
            return []

        products = [FakeStoreProduct.from_payload(item) for item in body if isinstance(item, dict)]
        logger.info("Fetched products from FakeStore", extra={"count": len(products)})
        return products
