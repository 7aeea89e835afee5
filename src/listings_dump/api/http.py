# src/listings_dump/api/http.py
from __future__ import annotations

from typing import Callable

from fastapi import FastAPI, Query
from fastapi.responses import PlainTextResponse

from listings_dump.adapters.bigquery_warehouse import make_bigquery_warehouse
from listings_dump.adapters.config import AppConfig
from listings_dump.adapters.domain_client import make_domain_client
from listings_dump.adapters.logging_utils import get_logger
from listings_dump.domain.ports import ListingsSource, Warehouse
from listings_dump.services.dump import ErrorPolicy, Suburb, run_dump

logger = get_logger(__name__)

SourceFactory = Callable[[AppConfig], ListingsSource]
WarehouseFactory = Callable[[AppConfig], Warehouse]


def create_app(
    config: AppConfig,
    *,
    source_factory: SourceFactory = make_domain_client,
    warehouse_factory: WarehouseFactory = make_bigquery_warehouse,
) -> FastAPI:
    """
    Build the /fetch server around an already-validated config.

    Every request gets its own warehouse client and listings client;
    nothing mutable is shared between requests.
    """
    app = FastAPI(title="listings-dump")

    @app.api_route("/fetch", methods=["GET", "POST"], response_class=PlainTextResponse)
    def fetch(suburb: list[str] = Query(default=[])) -> PlainTextResponse:
        try:
            run_dump(
                config,
                [Suburb(name=s) for s in suburb],
                source=source_factory(config),
                warehouse=warehouse_factory(config),
                policy=ErrorPolicy.FETCH_FATAL,
            )
        except Exception as e:
            logger.error(str(e), extra={"context": {"suburbs": suburb}})
            return PlainTextResponse(f"/fetch failed: {e}", status_code=500)

        logger.info("OK")
        return PlainTextResponse("OK")

    return app
