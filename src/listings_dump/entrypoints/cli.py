# src/listings_dump/entrypoints/cli.py
from __future__ import annotations

from typing import Any, Optional

import typer
from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from listings_dump.adapters.bigquery_warehouse import make_bigquery_warehouse
from listings_dump.adapters.config import AppConfig, load_config
from listings_dump.adapters.domain_client import make_domain_client
from listings_dump.adapters.logging_utils import get_logger, set_log_level
from listings_dump.domain.errors import ConfigError, DumpError
from listings_dump.services.dump import ErrorPolicy, Suburb, run_dump

logger = get_logger(__name__)

app = typer.Typer(help="Dump Domain rental listings into BigQuery.")


@app.callback()
def main(
    ctx: typer.Context,
    domain_api_key: Optional[str] = typer.Option(None, "--domain-api-key", help="Domain API key"),
    bigquery_project_id: Optional[str] = typer.Option(
        None, "--bigquery-project-id", help="Google BigQuery Project ID"
    ),
    dataset: Optional[str] = typer.Option(None, help="BigQuery dataset ID [default: domain]"),
    table: Optional[str] = typer.Option(None, help="BigQuery table ID [default: listings_test]"),
    state: Optional[str] = typer.Option(None, help="State to search [default: NSW]"),
) -> None:
    """
    Flags override LISTINGS_* environment variables (and .env).
    """
    ctx.obj = {
        "DOMAIN_API_KEY": domain_api_key,
        "BIGQUERY_PROJECT_ID": bigquery_project_id,
        "DATASET": dataset,
        "TABLE": table,
        "STATE": state,
    }


def _fatal(msg: str) -> typer.Exit:
    logger.critical(msg)
    return typer.Exit(code=1)


def _config(ctx: typer.Context, **extra: Any) -> AppConfig:
    load_dotenv(find_dotenv(usecwd=True))
    try:
        config = load_config(**(ctx.obj or {}), **extra).require()
    except (ConfigError, ValidationError) as e:
        raise _fatal(str(e)) from e
    set_log_level(config.LOG_LEVEL)
    return config


@app.command()
def serve(ctx: typer.Context) -> None:
    """
    Run the /fetch HTTP server on $PORT (default 8080).
    """
    import uvicorn

    from listings_dump.api.http import create_app

    config = _config(ctx)
    logger.info("Fetch server started.", extra={"context": {"port": config.PORT}})
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.PORT)


@app.command()
def once(
    ctx: typer.Context,
    suburb: Optional[str] = typer.Option(None, help="Suburb to search [default: Pyrmont]"),
    postcode: Optional[str] = typer.Option(None, help="Postcode to search [default: 2009]"),
) -> None:
    """
    Fetch one suburb and insert it, then exit.

    A failed search is logged and the command still exits 0; failing to
    provision or insert exits 1.
    """
    config = _config(ctx, SUBURB=suburb, POSTCODE=postcode)

    try:
        report = run_dump(
            config,
            [Suburb(name=config.SUBURB, postcode=config.POSTCODE)],
            source=make_domain_client(config),
            warehouse=make_bigquery_warehouse(config),
            policy=ErrorPolicy.FETCH_SOFT,
        )
    except DumpError as e:
        raise _fatal(str(e)) from e

    if report.ok:
        logger.info("OK", extra={"context": {"inserted": report.inserted}})


if __name__ == "__main__":
    app()
