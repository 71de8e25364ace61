"""CLI commands: one module per area (database, uploads, MSL catalog, dashboard)."""

from typer import Typer

from fieldsales.cli import dashboard, init_db as init_db_module, msl, upload

app = Typer(help="Field sales MSL achievement and CSV reconciliation")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command(name="init-db")(init_db_module.init_db)
    app.command(name="upload-msl")(upload.upload_msl)
    app.command(name="upload-products")(upload.upload_products)
    app.command(name="upload-stores")(upload.upload_stores)
    app.command(name="list-msl")(msl.list_msl)
    app.command(name="export-msl")(msl.export_msl)
    app.command(name="reorder-msl")(msl.reorder_msl)
    app.command()(msl.categories)
    app.command()(msl.template)
    app.command()(dashboard.achievement)
    app.command()(dashboard.recap)
    app.command()(dashboard.overview)


register_commands()
