# src/listings_dump/adapters/domain_client.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests
from pydantic import ValidationError

from listings_dump.adapters.config import AppConfig
from listings_dump.adapters.logging_utils import get_logger
from listings_dump.domain.errors import ConfigError, DomainAPIError
from listings_dump.domain.listing import SearchResult
from listings_dump.domain.ports import ResidentialSearchRequest

logger = get_logger(__name__)


@dataclass(frozen=True)
class DomainClient:
    """
    Thin client for the Domain listings API (residential search only).

    One request per search, no retries: the caller decides what a failure
    means for the run.
    """
    base_url: str
    api_key: str
    timeout_s: float = 20.0

    def post(self, path: str, body: dict[str, Any]) -> Any:
        url = self.base_url.rstrip("/") + "/" + path.lstrip("/")

        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "X-Api-Key": self.api_key,
        }

        try:
            resp = requests.post(url, headers=headers, json=body, timeout=self.timeout_s)
        except requests.RequestException as e:
            raise DomainAPIError(f"Domain request failed: {e!r}") from e

        if resp.status_code >= 400:
            raise DomainAPIError(
                f"Domain HTTP {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except ValueError as e:
            raise DomainAPIError(f"Domain returned non-JSON body: {resp.text[:200]}") from e

    def search_residential(self, request: ResidentialSearchRequest) -> list[SearchResult]:
        data = self.post("/listings/residential/_search", request.to_payload())
        if not isinstance(data, list):
            raise DomainAPIError(
                f"unexpected search response shape: {type(data).__name__}"
            )

        try:
            results = [SearchResult.model_validate(item) for item in data]
        except ValidationError as e:
            raise DomainAPIError(f"couldn't parse search results: {e}") from e

        logger.debug(
            "domain_search_ok",
            extra={"context": {"results": len(results), "request": request.to_payload()}},
        )
        return results


def make_domain_client(config: AppConfig) -> DomainClient:
    if not config.DOMAIN_API_KEY:
        raise ConfigError("--domain_api_key flag required")

    return DomainClient(
        base_url=config.DOMAIN_BASE_URL,
        api_key=config.DOMAIN_API_KEY,
        timeout_s=config.DOMAIN_TIMEOUT_S,
    )
