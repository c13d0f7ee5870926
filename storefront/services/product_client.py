# storefront/services/product_client.py
import requests

from storefront.domain.errors import NotFoundError
from storefront.utils.retry import http_retry
from storefront.utils.settings import PRODUCT_SERVICE_URL, PRODUCT_SERVICE_TIMEOUT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    def __init__(self, base_url: str | None = None, timeout: int = PRODUCT_SERVICE_TIMEOUT):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def fetch_product(self, product_id: str) -> dict:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"ProductClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            raise NotFoundError(f"Product '{product_id}' not found")
        resp.raise_for_status()
        return resp.json()

    @http_retry()
    def fetch_variation(self, product_id: str, variation_id: str) -> dict:
        url = f"{self.base_url}/products/{product_id}/variations/{variation_id}"
        logger.info(f"ProductClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            raise NotFoundError(
                f"Variation '{variation_id}' of product '{product_id}' not found"
            )
        resp.raise_for_status()
        return resp.json()
