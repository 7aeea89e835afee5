# src/listings_dump/services/dump.py
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, Sequence

from listings_dump.adapters.config import AppConfig
from listings_dump.adapters.logging_utils import get_logger
from listings_dump.domain.errors import FetchError, InsertError
from listings_dump.domain.listing import SearchResult
from listings_dump.domain.ports import (
    ListingsSource,
    ResidentialSearchRequest,
    Row,
    Warehouse,
    build_search_request,
)
from listings_dump.domain.schema import row_schema
from listings_dump.services.provisioning import provision

logger = get_logger(__name__)


class ErrorPolicy(enum.Enum):
    """
    What a failed listings search does to the run.

    FETCH_FATAL: raise, the caller fails the whole request (server mode).
    FETCH_SOFT: log it and stop quietly (one-shot mode).

    Insert and provisioning failures are fatal under both.
    """
    FETCH_FATAL = "fetch_fatal"
    FETCH_SOFT = "fetch_soft"


@dataclass(frozen=True)
class Suburb:
    name: str
    postcode: str | None = None


@dataclass
class DumpReport:
    fetch_time: datetime
    inserted: dict[str, int] = field(default_factory=dict)
    soft_failure: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.soft_failure is None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def rows_from_results(results: Iterable[SearchResult], fetch_time: datetime) -> list[Row]:
    return [Row(fetch_time=fetch_time, listing=r.listing) for r in results]


def fetch_suburb(source: ListingsSource, request: ResidentialSearchRequest) -> list[SearchResult]:
    try:
        return source.search_residential(request)
    except Exception as e:
        raise FetchError(request, e) from e


def insert_batch(warehouse: Warehouse, dataset_id: str, table_id: str, rows: Sequence[Row]) -> None:
    # one call per suburb, empty batches included
    try:
        warehouse.insert_rows(dataset_id, table_id, rows)
    except Exception as e:
        raise InsertError(f"could not insert to bigquery: {e}") from e


def run_dump(
    config: AppConfig,
    suburbs: Sequence[Suburb],
    *,
    source: ListingsSource,
    warehouse: Warehouse,
    policy: ErrorPolicy = ErrorPolicy.FETCH_FATAL,
    now: Callable[[], datetime] = utc_now,
) -> DumpReport:
    """
    Provision the table, then search + insert each suburb in order.

    The fetch time is captured once, before provisioning, and stamped on
    every row of the run. The first error ends the run.
    """
    report = DumpReport(fetch_time=now())

    provision(
        warehouse,
        dataset_id=config.DATASET,
        table_id=config.TABLE,
        schema=row_schema(),
        display_name=config.TABLE_DISPLAY_NAME,
    )

    for suburb in suburbs:
        request = build_search_request(
            state=config.STATE,
            suburb=suburb.name,
            postcode=suburb.postcode,
        )

        try:
            results = fetch_suburb(source, request)
        except FetchError as e:
            if policy is ErrorPolicy.FETCH_FATAL:
                raise
            logger.error(str(e), extra={"context": {"suburb": suburb.name}})
            report.soft_failure = e
            return report

        rows = rows_from_results(results, report.fetch_time)
        insert_batch(warehouse, config.DATASET, config.TABLE, rows)

        report.inserted[suburb.name] = report.inserted.get(suburb.name, 0) + len(rows)
        logger.info(
            "suburb_inserted",
            extra={"context": {"suburb": suburb.name, "rows": len(rows)}},
        )

    return report
