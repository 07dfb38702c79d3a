"""Catalog editing commands."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from src.catalog.core.errors import CatalogError, ImageReadError
from src.catalog.core.services import (
    CatalogService,
    build_storefront,
    create_product_storage,
    encode_data_uri,
)
from src.catalog.core.storage.kv_store import create_kv_store
from src.catalog.entities.service.product import (
    SIZE_LABELS,
    Product,
    ProductCandidate,
    ProductType,
)
from src.catalog.runtime.context import get_config

console = Console()

catalog_app = typer.Typer(help="Edit the product catalog")


async def _open_service() -> CatalogService:
    config = get_config()
    store = await create_kv_store()
    return CatalogService(create_product_storage(store, config.storage.key))


def _run(operation):
    """Run ``operation(service)`` and turn catalog errors into a clean exit."""

    async def _main():
        service = await _open_service()
        try:
            return await operation(service)
        finally:
            await service.storage.store.close()

    try:
        return asyncio.run(_main())
    except CatalogError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(code=1) from e


def _slot_markers(product: Product) -> str:
    return "".join("■" if src else "□" for src in product.images)


@catalog_app.command("list")
def list_products() -> None:
    """List all products in collection order."""
    products = _run(lambda service: service.list_products())

    if not products:
        console.print("[yellow]No products yet. Add one with 'new'.[/yellow]")
        return

    table = Table(title="Products")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Price", style="magenta", justify="right")
    table.add_column("Type", style="blue")
    table.add_column("Images", style="yellow")

    for product in products:
        table.add_row(
            product.id,
            product.name,
            product.display_price,
            product.type.value,
            _slot_markers(product),
        )

    console.print(table)


@catalog_app.command("new")
def new_product() -> None:
    """Create an empty product and print its id."""
    product = _run(lambda service: service.new_product())
    console.print(f"[green]✅ Created product {product.id}[/green]")


@catalog_app.command("save")
def save_product(
    product_id: str = typer.Argument(..., help="Product id (created if absent)"),
    name: str = typer.Option(..., "--name", "-n", help="Display name"),
    description: str = typer.Option(..., "--description", "-d", help="Description"),
    price: str = typer.Option("0", "--price", "-p", help="Unit price"),
    product_type: ProductType = typer.Option(
        ProductType.NON_APPAREL, "--type", "-t", help="Product type"
    ),
    size: list[str] = typer.Option(
        [], "--size", "-s", help="Stock per size as LABEL=QTY, e.g. M=2"
    ),
) -> None:
    """Save product fields, keeping any stored images."""
    sizes = {}
    for entry in size:
        label, _, quantity = entry.partition("=")
        if label.upper() not in SIZE_LABELS:
            console.print(f"[red]❌ Unknown size '{label}'[/red]")
            raise typer.Exit(code=1)
        sizes[label.upper()] = quantity

    candidate = ProductCandidate(
        id=product_id,
        name=name,
        description=description,
        price=price,
        type=product_type.value,
        sizes=sizes,
    )
    product = _run(lambda service: service.save_product(candidate))
    console.print(f"[green]✅ Saved {product.name} ({product.id})[/green]")


@catalog_app.command("show")
def show_product(product_id: str = typer.Argument(..., help="Product id")) -> None:
    """Show one product."""
    product = _run(lambda service: service.get_product(product_id))

    console.print(f"[bold]{product.name}[/bold] [dim]({product.id})[/dim]")
    console.print(product.description)
    console.print(f"Price: {product.display_price}")
    console.print(f"Type: {product.type.value}")
    if product.is_apparel:
        console.print(f"Inventory: {product.sizes.inventory_line()}")
    for index, src in enumerate(product.images):
        console.print(f"  #{index + 1}: {'filled' if src else 'empty'}")


@catalog_app.command("delete")
def delete_product(
    product_id: str = typer.Argument(..., help="Product id"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Delete a product permanently."""
    if not force and not Confirm.ask(f"Delete product {product_id} permanently?"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    remaining = _run(lambda service: service.delete_product(product_id))
    console.print(f"[green]✅ Deleted. {len(remaining)} product(s) remain.[/green]")


@catalog_app.command("set-image")
def set_image(
    product_id: str = typer.Argument(..., help="Product id"),
    slot: int = typer.Argument(..., help="Slot number, 1-6"),
    image: Path = typer.Argument(..., exists=True, dir_okay=False, help="Image file"),
) -> None:
    """Upload an image into a slot, replacing what is there."""

    async def _set(service: CatalogService):
        try:
            data = image.read_bytes()
        except OSError as e:
            raise ImageReadError(f"Could not read {image}: {e}") from e
        data_uri = encode_data_uri(data, filename=image.name)
        manager = await service.image_manager(product_id)
        return await manager.set_slot(slot - 1, data_uri)

    _run(_set)
    console.print(f"[green]✅ Slot #{slot} updated[/green]")


@catalog_app.command("clear-image")
def clear_image(
    product_id: str = typer.Argument(..., help="Product id"),
    slot: int = typer.Argument(..., help="Slot number, 1-6"),
) -> None:
    """Clear an image slot."""

    async def _clear(service: CatalogService):
        manager = await service.image_manager(product_id)
        return await manager.clear_slot(slot - 1)

    _run(_clear)
    console.print(f"[green]✅ Slot #{slot} cleared[/green]")


@catalog_app.command("store")
def store() -> None:
    """Print the storefront listing."""
    items = build_storefront(_run(lambda service: service.list_products()))

    if not items:
        console.print("[yellow]No items available.[/yellow]")
        return

    table = Table(title="Store")
    table.add_column("Name", style="green")
    table.add_column("Description")
    table.add_column("Price", style="magenta", justify="right")
    table.add_column("Inventory", style="cyan")
    table.add_column("Images", style="yellow")

    for item in items:
        table.add_row(
            item.name,
            item.description,
            item.price,
            item.inventory_line or "",
            str(sum(1 for src in item.thumbnails if src)),
        )

    console.print(table)
