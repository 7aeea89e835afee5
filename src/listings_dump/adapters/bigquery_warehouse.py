# src/listings_dump/adapters/bigquery_warehouse.py
from __future__ import annotations

from typing import Any, Sequence

from google.api_core import exceptions as gapi_exceptions
from google.cloud import bigquery

from listings_dump.adapters.config import AppConfig
from listings_dump.adapters.logging_utils import get_logger
from listings_dump.domain.errors import ConfigError, InsertError, ProvisioningError
from listings_dump.domain.ports import Failed, Found, Lookup, NotFound, Row

logger = get_logger(__name__)


class BigQueryWarehouse:
    """
    Warehouse backed by google-cloud-bigquery.

    Lookups never raise: they hand back Found / NotFound / Failed so the
    provisioning step can decide whether "missing" means "create it".
    """

    def __init__(self, client: bigquery.Client, project_id: str) -> None:
        self.client = client
        self.project_id = project_id

    def _dataset_ref(self, dataset_id: str) -> str:
        return f"{self.project_id}.{dataset_id}"

    def _table_ref(self, dataset_id: str, table_id: str) -> str:
        return f"{self.project_id}.{dataset_id}.{table_id}"

    # -----------------------------
    # Dataset / table existence
    # -----------------------------
    def lookup_dataset(self, dataset_id: str) -> Lookup:
        return self._lookup(self.client.get_dataset, self._dataset_ref(dataset_id))

    def create_dataset(self, dataset_id: str) -> None:
        self.client.create_dataset(
            bigquery.Dataset(self._dataset_ref(dataset_id)),
            exists_ok=True,
        )

    def lookup_table(self, dataset_id: str, table_id: str) -> Lookup:
        return self._lookup(self.client.get_table, self._table_ref(dataset_id, table_id))

    def create_table(self, dataset_id: str, table_id: str) -> None:
        self.client.create_table(
            bigquery.Table(self._table_ref(dataset_id, table_id)),
            exists_ok=True,
        )

    def update_table(
        self,
        dataset_id: str,
        table_id: str,
        *,
        friendly_name: str,
        schema: Sequence[bigquery.SchemaField],
    ) -> None:
        table = bigquery.Table(self._table_ref(dataset_id, table_id))
        table.friendly_name = friendly_name
        table.schema = list(schema)
        # no etag: always overwrite
        self.client.update_table(table, ["friendly_name", "schema"])

    @staticmethod
    def _lookup(getter: Any, ref: str) -> Lookup:
        try:
            return Found(getter(ref))
        except gapi_exceptions.NotFound:
            return NotFound()
        except Exception as e:
            return Failed(e)

    # -----------------------------
    # Streaming insert
    # -----------------------------
    def insert_rows(self, dataset_id: str, table_id: str, rows: Sequence[Row]) -> None:
        if not rows:
            return

        errors = self.client.insert_rows_json(
            self._table_ref(dataset_id, table_id),
            [r.to_json_row() for r in rows],
        )
        if errors:
            raise InsertError(f"{len(errors)} row(s) rejected: {errors[:5]}")


def make_bigquery_warehouse(config: AppConfig) -> BigQueryWarehouse:
    if not config.BIGQUERY_PROJECT_ID:
        raise ConfigError("--bigquery_project_id flag required")

    try:
        client = bigquery.Client(project=config.BIGQUERY_PROJECT_ID)
    except Exception as e:
        raise ProvisioningError(f"Could not create BigQuery client: {e}") from e

    return BigQueryWarehouse(client, config.BIGQUERY_PROJECT_ID)
