"""
Client for the external game catalog API (RAWG compatible)

One synchronous request per call: no retries, no caching.
"""
import logging
from datetime import date
from typing import Dict, List, Optional

import requests

from release_tracker.exceptions import (
    CatalogClientError,
    CatalogServerError,
    CatalogTransportError,
)
from release_tracker.services.catalog_records import (
    CatalogPage,
    GameDetail,
    StoreLink,
    parse_store_directory,
    parse_store_links,
)
from release_tracker.utils import sanitize_sensitive_data

logger = logging.getLogger("main")

DEFAULT_END_DATE = "2099-12-31"


class CatalogClient:
    """Client for the catalog API"""

    def __init__(self, api_url: str, api_key: str, timeout: int = 10,
                 end_date: str = DEFAULT_END_DATE, session: Optional[requests.Session] = None):
        self.api_url = api_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.end_date = end_date
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "ReleaseTracker catalog sync"
        })

    def _get(self, path: str, params: Optional[Dict] = None) -> Dict:
        """GET api_url + path, returning the decoded JSON body or raising a CatalogAPIException"""
        query = dict(params or {})
        query["key"] = self.api_key
        url = f"{self.api_url}{path}"
        logger.debug(f"GET {url} {sanitize_sensitive_data(query)}")

        try:
            response = self.session.get(url, params=query, timeout=self.timeout)
        except requests.RequestException as e:
            raise CatalogTransportError(f"Request to {path} failed: {e}")

        if 400 <= response.status_code < 500:
            raise CatalogClientError(
                f"Catalog API returned {response.status_code} for {path}",
                status_code=response.status_code,
                body=response.text,
            )
        if response.status_code >= 500:
            raise CatalogServerError(
                f"Catalog API returned {response.status_code} for {path}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise CatalogTransportError(f"Invalid JSON from {path}: {e}", status_code=response.status_code)

    def list_games_page(self, since: date, page: int, page_size: int) -> CatalogPage:
        """One page of games released between `since` and the end date, ordered by release date"""
        data = self._get("/games", {
            "dates": f"{since.isoformat()},{self.end_date}",
            "page": page,
            "page_size": page_size,
            "ordering": "released",
        })
        return CatalogPage.from_json(data)

    def get_game_detail(self, slug: str) -> GameDetail:
        return GameDetail.from_json(self._get(f"/games/{slug}"))

    def list_stores(self) -> Dict[int, str]:
        """Store directory: id -> display name"""
        return parse_store_directory(self._get("/stores"))

    def list_store_links(self, slug: str) -> List[StoreLink]:
        return parse_store_links(self._get(f"/games/{slug}/stores"))


def build_catalog_client(catalog_settings: Dict) -> CatalogClient:
    return CatalogClient(
        api_url=catalog_settings["api_url"],
        api_key=catalog_settings.get("api_key", ""),
        timeout=catalog_settings.get("timeout", 10),
        end_date=catalog_settings.get("end_date", DEFAULT_END_DATE),
    )
