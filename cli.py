# cli.py - interactive product catalogue with autocomplete
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import IntPrompt, Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.products import DEFAULT_BASE_URL, ProductClient, ProductClientError

console = Console()
c = ProductClient(base_url=DEFAULT_BASE_URL)


# Global state for status messages and caching
status_message = "Ready"
product_cache: List[Dict[str, Any]] = []
category_cache = set()

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]], title: str = "📦 Products Catalog"):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=24)
    table.add_column("Name", style="bold", width=24)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Qty", justify="right", width=6)
    table.add_column("Stock", width=6)
    table.add_column("Category", width=15)

    for p in products:
        in_stock = "[green]yes[/green]" if p.get("inStock") else "[red]no[/red]"
        table.add_row(
            p.get("id", "N/A"),
            p.get("name", "N/A"),
            f"${p.get('price', 0):.2f}",
            str(p.get("quantity", 0)),
            in_stock,
            p.get("category", "N/A")
        )
    console.print(table)


def show_listing(listing: Dict[str, Any]):
    show_products(listing.get("data", []))
    console.print(
        f"[dim]page {listing.get('page')} of {listing.get('totalPages')} "
        f"· {listing.get('results')} shown · {listing.get('total')} matching[/dim]"
    )


def show_product_detail(product: Dict[str, Any]):
    lines = [
        f"[bold]{product.get('name')}[/bold]",
        product.get("description", ""),
        "",
        f"💰 Price: [green]${product.get('price', 0):.2f}[/green]",
        f"📦 Quantity: {product.get('quantity', 0)} ({'in stock' if product.get('inStock') else 'out of stock'})",
        f"🏷️ Category: {product.get('category')}",
        f"[dim]created {product.get('createdAt')} · updated {product.get('updatedAt')}[/dim]",
    ]
    console.print(Panel.fit("\n".join(lines), title=f"ℹ️ {product.get('id')}", border_style="cyan"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper with error reporting
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    API errors are shown (with per-field validation messages) and yield None.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except ProductClientError as e:
        status_message = f"Error: {e}"
        console.print(show_status(status_message, False))
        for err in e.errors:
            console.print(f"  [yellow]{err['field']}[/yellow]: {err['message']}")
        return None
    except Exception as e:
        status_message = f"Error: {e}"
        console.print(show_status(status_message, False))
        return None


# ---------------------------
# Autocompletion helpers
# ---------------------------
def refresh_cache():
    global product_cache
    listing = try_api(c.list_products, limit=100)
    product_cache = listing["data"] if listing else []
    for p in product_cache:
        category_cache.add(p.get("category", ""))


def get_product_completer():
    if not product_cache:
        refresh_cache()
    ids = [p.get("id", "") for p in product_cache]
    return WordCompleter([i for i in ids if i], ignore_case=True)


def get_category_completer():
    return WordCompleter([cat for cat in category_cache if cat], ignore_case=True)


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: float = 10.0) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


def ask_optional(message: str) -> Optional[str]:
    raw = prompt_with_autocomplete(f"{message} (blank to skip)").strip()
    return raw or None


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ Product API",
        f"[bold blue]{c.base_url}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Menu actions
# ---------------------------
def list_with_filters():
    filters = {
        "category": ask_optional("🏷️ Category"),
        "min_price": ask_optional("Min price"),
        "max_price": ask_optional("Max price"),
        "sort_by": ask_optional("Sort by (createdAt, price, name, ...)"),
        "sort_order": ask_optional("Sort order (asc/desc)"),
        "page": IntPrompt.ask("Page", default=1),
        "limit": IntPrompt.ask("Page size", default=10),
    }
    if Confirm.ask("Only products in stock?", default=False):
        filters["in_stock"] = True
    listing = try_api(c.list_products, **filters, success_msg="Products loaded")
    if listing:
        show_listing(listing)


def create_product():
    name = prompt_with_autocomplete("Enter product name")
    description = prompt_with_autocomplete("Enter description")
    price = ask_float("💰 Price in dollars", default=10.0)
    qty = IntPrompt.ask("📦 Quantity", default=0)
    category = prompt_with_autocomplete("🏷️ Category", completer=get_category_completer())
    in_stock = Confirm.ask("In stock?", default=True)
    product = try_api(
        c.create_product, name, description, price, category, in_stock=in_stock, quantity=qty,
        success_msg=f"Product '{name}' created"
    )
    if product:
        show_product_detail(product)
        refresh_cache()


def update_product():
    pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer())
    current = try_api(c.get_product, pid)
    if not current:
        return
    show_product_detail(current)

    fields: Dict[str, Any] = {}
    for key in ("name", "description", "category"):
        value = ask_optional(f"New {key}")
        if value is not None:
            fields[key] = value
    price = ask_optional("New price")
    if price is not None:
        try:
            fields["price"] = float(price)
        except ValueError:
            fields["price"] = price  # let the server report it
    qty = ask_optional("New quantity")
    if qty is not None:
        fields["quantity"] = qty
    if Confirm.ask("Change stock status?", default=False):
        fields["inStock"] = Confirm.ask("In stock?", default=bool(current.get("inStock")))

    if not fields:
        console.print("[italic yellow]Nothing to update[/italic yellow]")
        return
    product = try_api(c.update_product, pid, **fields, success_msg=f"Product {pid} updated")
    if product:
        show_product_detail(product)
        refresh_cache()


def delete_product():
    pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer())
    if not Confirm.ask(f"[red]Delete product {pid}?[/red]"):
        return
    try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted")
    refresh_cache()


# ---------------------------
# Main menu
# ---------------------------
def menu():
    console.clear()
    console.print(create_header())

    refresh_cache()

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "5", "✏️ Update product"),
            ("2", "🔎 Filter & sort", "6", "🗑️ Delete product"),
            ("3", "🔍 Search by name", "7", "❤️ Server health"),
            ("4", "➕ Create product", "q", "👋 Quit"),
            ("", "", "i", "ℹ️ Get product by ID"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 8)] + ["i", "q", "quit", "exit"])
        ).strip()

        if choice == "1":
            listing = try_api(c.list_products, success_msg="Products loaded successfully")
            if listing:
                show_listing(listing)

        elif choice == "2":
            list_with_filters()

        elif choice == "3":
            term = prompt_with_autocomplete("Enter search term")
            listing = try_api(c.search_products, term, success_msg=f"Search for '{term}' completed")
            if listing:
                show_listing(listing)

        elif choice == "4":
            create_product()

        elif choice == "5":
            update_product()

        elif choice == "6":
            delete_product()

        elif choice == "7":
            health = try_api(c.health)
            if health:
                db_style = "green" if health.get("database") == "up" else "red"
                console.print(Panel.fit(
                    f"{health.get('message')}\nDatabase: [{db_style}]{health.get('database')}[/{db_style}]",
                    title="❤️ Health"
                ))

        elif choice == "i":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer())
            product = try_api(c.get_product, pid, success_msg=f"Product {pid} details loaded")
            if product:
                show_product_detail(product)

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Goodbye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


def main():
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
