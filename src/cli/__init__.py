"""Main CLI application module."""

import typer

from src.catalog.api.utils.app_startup import configure_logging

from .catalog_commands import catalog_app

# Create the main CLI application
app = typer.Typer(
    help="🛍️  Catalog Editor CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(catalog_app, name="products")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Also log to the console"),
) -> None:
    """Configure logging before any command runs."""
    configure_logging(console=verbose)


@app.command("serve")
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (defaults to config)"),
    port: int = typer.Option(None, "--port", help="Port (defaults to config)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP editor and storefront."""
    import uvicorn

    from src.catalog.runtime.context import get_config

    config = get_config()
    uvicorn.run(
        "src.catalog.api.http.app:app",
        host=host or config.app.host,
        port=port or config.app.port,
        reload=reload,
        access_log=False,
    )


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
