# src/listings_dump/services/provisioning.py
from __future__ import annotations

from typing import Any, Sequence

from listings_dump.adapters.logging_utils import get_logger
from listings_dump.domain.errors import ProvisioningError
from listings_dump.domain.ports import Failed, Found, NotFound, Warehouse

logger = get_logger(__name__)


def ensure_dataset(warehouse: Warehouse, dataset_id: str) -> None:
    res = warehouse.lookup_dataset(dataset_id)

    if isinstance(res, NotFound):
        logger.info("creating_dataset", extra={"context": {"dataset": dataset_id}})
        try:
            warehouse.create_dataset(dataset_id)
        except Exception as e:
            raise ProvisioningError(f"Couldn't create dataset: {e}") from e
    elif isinstance(res, Failed):
        raise ProvisioningError(f"Couldn't get dataset metadata: {res.cause}") from res.cause
    elif isinstance(res, Found):
        logger.debug(
            "dataset_found",
            extra={"context": {"dataset": dataset_id, "metadata": repr(res.metadata)}},
        )


def ensure_table(warehouse: Warehouse, dataset_id: str, table_id: str) -> None:
    res = warehouse.lookup_table(dataset_id, table_id)

    if isinstance(res, NotFound):
        logger.info(
            "creating_table",
            extra={"context": {"dataset": dataset_id, "table": table_id}},
        )
        try:
            warehouse.create_table(dataset_id, table_id)
        except Exception as e:
            raise ProvisioningError(f"Couldn't create table: {e}") from e
    elif isinstance(res, Failed):
        raise ProvisioningError(f"couldn't get table metadata: {res.cause}") from res.cause


def provision(
    warehouse: Warehouse,
    *,
    dataset_id: str,
    table_id: str,
    schema: Sequence[Any],
    display_name: str,
) -> None:
    """
    Make sure dataset + table exist and carry the current schema.

    The metadata update runs every time, even when nothing changed, so new
    optional listing fields reach the table on the next run.
    """
    ensure_dataset(warehouse, dataset_id)
    ensure_table(warehouse, dataset_id, table_id)

    try:
        warehouse.update_table(
            dataset_id,
            table_id,
            friendly_name=display_name,
            schema=schema,
        )
    except Exception as e:
        raise ProvisioningError(f"couldn't update table metadata: {e}") from e
