"""
Supply Dashboard — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Execute action (DB init, CSV import, insight report, etc.).
  5. Report result to stdout; failures go to stderr with exit code 1.

Install and run::

    pip install -e .
    supply-dashboard --help
    supply-dashboard init-db
    supply-dashboard import-csv --products products.csv --sales sales.csv
    supply-dashboard insights
    supply-dashboard stocks
    supply-dashboard export
    supply-dashboard watch --interval 60
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="supply-dashboard",
    help="Stock levels, demand forecasts and production recommendations.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from supply_dashboard.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from supply_dashboard.utils.logging import configure_logging
    configure_logging(config.logging)


def _build_service(config, db_path: Optional[str]):
    from supply_dashboard.service import InsightService, SQLiteInventoryStore

    store = None
    if db_path:
        store = SQLiteInventoryStore(
            db_path,
            wal_mode=config.database.wal_mode,
            busy_timeout_ms=config.database.busy_timeout_ms,
        )
    return InsightService.from_config(config, store=store)


def _fail(message: str, exc: Exception) -> None:
    typer.echo(f"[ERROR] {message}: {exc}", err=True)
    raise typer.Exit(code=1)


_DB_PATH_OPTION = typer.Option(
    None, "--db-path", help="Override DB path from config.",
)
_CONFIG_OPTION = typer.Option(
    None, "--config", help="Path to TOML config file.",
)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("init-db")
def init_db(
    db_path: Optional[str] = _DB_PATH_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Initialize the SQLite database and apply the schema.

    Safe to run multiple times: all DDL uses IF NOT EXISTS.
    """
    from supply_dashboard.db.connection import get_connection
    from supply_dashboard.db.schema import ALL_TABLE_NAMES, apply_schema

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target_path = db_path or config.database.db_path
    typer.echo(f"Initializing database at: {target_path}")

    try:
        with get_connection(
            target_path,
            wal_mode=config.database.wal_mode,
            busy_timeout_ms=config.database.busy_timeout_ms,
        ) as conn:
            apply_schema(conn)
    except sqlite3.Error as exc:
        _fail("Database initialization failed", exc)

    typer.echo(f"  Tables: {len(ALL_TABLE_NAMES)} created/verified.")
    typer.echo("[OK] Database ready.")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _CONFIG_OPTION,
    show_full: bool = typer.Option(
        False, "--full", help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Database path:     {config.database.db_path}")
    typer.echo(f"  Forecast window:   {config.forecast.window} sales")
    typer.echo(
        "  Stock thresholds:  "
        f"low<{config.thresholds.low_days:g}d  "
        f"adequate<{config.thresholds.adequate_days:g}d  "
        f"high>{config.thresholds.high_days:g}d"
    )
    typer.echo(f"  Refresh interval:  {config.dashboard.refresh_seconds}s")
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))


@app.command("import-csv")
def import_csv(
    products_path: Optional[str] = typer.Option(
        None, "--products", help="CSV with columns id,name,stock[,status].",
    ),
    sales_path: Optional[str] = typer.Option(
        None, "--sales", help="CSV with columns id,product_id,quantity,date[,revenue].",
    ),
    db_path: Optional[str] = _DB_PATH_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Load products and/or sales from CSV files into the database.

    Products are upserted by id; sales are inserted and must reference an
    existing product. Both files are fully validated before anything is
    written, and the whole import runs in one transaction.
    """
    from supply_dashboard.db.connection import get_connection
    from supply_dashboard.db.repositories.inventory_repo import (
        ProductRepository,
        SaleRepository,
    )
    from supply_dashboard.db.schema import apply_schema
    from supply_dashboard.ingestion.csv_import import parse_products_csv, parse_sales_csv

    if not products_path and not sales_path:
        typer.echo("[ERROR] Pass --products and/or --sales.", err=True)
        raise typer.Exit(code=1)

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        products = parse_products_csv(Path(products_path)) if products_path else []
        sales = parse_sales_csv(Path(sales_path)) if sales_path else []
    except (FileNotFoundError, ValueError) as exc:
        _fail("CSV import failed", exc)

    target_path = db_path or config.database.db_path
    try:
        with get_connection(
            target_path,
            wal_mode=config.database.wal_mode,
            busy_timeout_ms=config.database.busy_timeout_ms,
        ) as conn:
            apply_schema(conn)
            n_products = ProductRepository(conn).upsert_many(products)
            n_sales = SaleRepository(conn).insert_many(sales)
    except sqlite3.Error as exc:
        _fail("Database write failed", exc)

    typer.echo(f"  Products upserted: {n_products}")
    typer.echo(f"  Sales inserted:    {n_sales}")
    typer.echo("[OK] Import complete.")


@app.command("insights")
def insights(
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON report."),
    db_path: Optional[str] = _DB_PATH_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Print demand forecasts and recommendations for every product."""
    from supply_dashboard.reporting.formatters import format_insights_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        report = _build_service(config, db_path).insight_report()
    except (sqlite3.Error, ValueError) as exc:
        _fail("Failed to generate insights", exc)

    if as_json:
        typer.echo(report.model_dump_json(indent=2))
    else:
        typer.echo(format_insights_table(report))


@app.command("stocks")
def stocks(
    db_path: Optional[str] = _DB_PATH_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Print the per-product stock table with status and days of stock."""
    from supply_dashboard.reporting.formatters import format_stock_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        report = _build_service(config, db_path).stock_report()
    except (sqlite3.Error, ValueError) as exc:
        _fail("Failed to fetch stock info", exc)

    typer.echo(format_stock_table(report))


@app.command("export")
def export(
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", help="Override report directory from config.",
    ),
    db_path: Optional[str] = _DB_PATH_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Write the current insight report to CSV and JSON files."""
    from supply_dashboard.reporting.export import write_insight_report

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        report = _build_service(config, db_path).insight_report()
    except (sqlite3.Error, ValueError) as exc:
        _fail("Failed to generate insights", exc)

    target = Path(output_dir or config.output.report_dir)
    try:
        csv_path, json_path = write_insight_report(report, target)
    except OSError as exc:
        _fail(f"Could not write report to {target}", exc)
    typer.echo(f"  CSV:  {csv_path}")
    typer.echo(f"  JSON: {json_path}")
    typer.echo("[OK] Export complete.")


@app.command("watch")
def watch(
    interval: Optional[int] = typer.Option(
        None, "--interval", min=1, help="Seconds between refreshes (default from config).",
    ),
    max_runs: Optional[int] = typer.Option(
        None, "--max-runs", min=1, help="Stop after this many refreshes.",
    ),
    db_path: Optional[str] = _DB_PATH_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Re-print the insight summary on a fixed interval until Ctrl-C."""
    from supply_dashboard.reporting.formatters import format_insights_table
    from supply_dashboard.scheduler import RefreshLoop

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    service = _build_service(config, db_path)

    def _refresh() -> None:
        typer.echo(format_insights_table(service.insight_report()))
        typer.echo("")

    loop = RefreshLoop(
        refresh=_refresh,
        interval_seconds=interval or config.dashboard.refresh_seconds,
        max_runs=max_runs,
    )
    loop.start()


if __name__ == "__main__":
    app()
