"""Barcode lookup against the Open Beauty Facts public database.

Used only when a barcode is not in the local catalog. Lookup is best effort:
a timeout, HTTP failure or unexpected payload is logged and reported as "no
match", so the caller answers with a plain 404.
"""

import logging
from dataclasses import dataclass, field

import httpx

from glowmate.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExternalProduct:
    """Catalog fields mapped from an external product record."""

    barcode: str
    name: str
    brand: str
    image_url: str
    ingredients: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    category: str = "Uncategorized"
    description: str = "Imported from OpenBeautyFacts"
    # Price is not published by the source
    price: float = 0.0


def parse_ingredients(text: str) -> list[str]:
    """Split a comma separated ingredient label into trimmed names."""
    return [part.strip() for part in text.split(",") if part.strip()]


def map_product(barcode: str, record: dict) -> ExternalProduct:
    """Map an Open Beauty Facts ``product`` object onto catalog fields."""
    ingredients_text = record.get("ingredients_text") or record.get("ingredients_text_en") or ""
    tags = record.get("categories_tags") or []
    return ExternalProduct(
        barcode=barcode,
        name=record.get("product_name") or record.get("product_name_en") or "Unknown Product",
        brand=record.get("brands") or "Unknown Brand",
        image_url=record.get("image_url") or record.get("image_front_url") or "",
        ingredients=parse_ingredients(ingredients_text),
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
    )


class ProductLookupClient:
    """HTTP client for the external product database."""

    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        self.settings = settings
        self._client = client

    def fetch(self, barcode: str) -> ExternalProduct | None:
        """Look up one barcode; returns None when there is no usable match."""
        if not self.settings.product_lookup_enabled:
            return None

        url = f"{self.settings.product_lookup_url.rstrip('/')}/{barcode}.json"
        try:
            if self._client is not None:
                response = self._client.get(url)
            else:
                with httpx.Client(timeout=self.settings.product_lookup_timeout_seconds) as client:
                    response = client.get(url)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException:
            logger.warning(f"Timed out looking up barcode {barcode}")
            return None
        except httpx.HTTPError as e:
            logger.warning(f"Product lookup failed for barcode {barcode}: {e}")
            return None
        except ValueError:
            logger.warning(f"Product lookup returned invalid JSON for barcode {barcode}")
            return None

        if not isinstance(data, dict) or data.get("status") != 1:
            return None
        record = data.get("product")
        if not isinstance(record, dict):
            return None

        logger.info(f"Found barcode {barcode} in external product database")
        return map_product(barcode, record)
