# cli.py
import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.pystore import StoreClient

console = Console()
c = StoreClient(base_url=os.getenv("STORE_API_URL", "http://127.0.0.1:8085"))

# Global state for status messages and caching
status_message = "Ready"
product_cache: List[Dict[str, Any]] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title="🐾 Products",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", justify="right", width=6)
    table.add_column("Name", style="bold", width=30)
    table.add_column("Price", justify="right", width=12)

    for p in products:
        table.add_row(
            str(p.get("id", "N/A")),
            p.get("name", "N/A"),
            f"${float(p.get('price', 0)):.2f}",
        )
    console.print(table)


def show_errors(payload: Dict[str, Any]):
    # payload is the 400 problem body: {"errors": {"price": ["..."]}}
    errors = payload.get("errors") or {}
    if not errors:
        console.print(Panel.fit(f"[red]{payload}[/red]", title="❌ Rejected"))
        return
    table = Table(box=box.ROUNDED, header_style="bold red")
    table.add_column("Field", style="bold")
    table.add_column("Problem")
    for field, messages in errors.items():
        table.add_row(field, "\n".join(messages))
    console.print(Panel(table, title=payload.get("title", "❌ Rejected"), border_style="red"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs) -> Tuple[bool, Any]:
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Returns (ok, result); ok is False when the call raised, and result is None.
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
    except Exception as e:
        status_message = f"Error: {e}"
        console.print(show_status(status_message, False))
        return False, None

    if success_msg:
        status_message = success_msg
        console.print(show_status(success_msg, True))
    return True, result


def refresh_products(success_msg: Optional[str] = None) -> Optional[List[Dict[str, Any]]]:
    global product_cache
    ok, products = try_api(c.list_products, success_msg=success_msg)
    if not ok:
        return None
    product_cache = products
    return products


# ---------------------------
# Actions
# ---------------------------
def view_product(pid: int) -> Optional[Dict[str, Any]]:
    global status_message
    ok, resp = try_api(c.get_product, pid)
    if not ok:
        return None
    if resp is None:
        status_message = f"Error: product {pid} not found"
        console.print(show_status(status_message, False))
        return None
    show_products([resp])
    return resp


def add_product(name: str, price: str) -> Optional[Dict[str, Any]]:
    global status_message
    ok, resp = try_api(c.create_product, name, price)
    if not ok:
        return None
    if "errors" in resp:
        show_errors(resp)
        return None
    status_message = f"Product '{resp['name']}' created with id {resp['id']}"
    show_products([resp])
    refresh_products()
    return resp


def change_product(pid: int, name: str, price: str) -> bool:
    global status_message
    ok, resp = try_api(c.update_product, pid, name, price)
    if not ok:
        return False
    if resp is not None:
        # SDK hands back the 400 payload or {"error": ...} for a 404
        if "errors" in resp:
            show_errors(resp)
        else:
            status_message = f"Error: {resp.get('error', resp)}"
            console.print(show_status(status_message, False))
        return False
    status_message = f"Product {pid} updated"
    refresh_products()
    return True


def remove_product(pid: int) -> bool:
    global status_message
    ok, deleted = try_api(c.delete_product, pid)
    if not ok:
        return False
    if not deleted:
        status_message = f"Error: product {pid} not found"
        console.print(show_status(status_message, False))
        return False
    status_message = f"Product {pid} deleted"
    refresh_products()
    return True


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def get_product_completer():
    if not product_cache:
        refresh_products()
    return WordCompleter([str(p.get("id")) for p in product_cache], ignore_case=True)


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_product_id() -> Optional[int]:
    raw = prompt_with_autocomplete("Enter product ID", completer=get_product_completer()).strip()
    try:
        return int(raw)
    except ValueError:
        console.print("[red]Product ID must be a whole number.[/red]")
        return None


def ask_price(message: str, default: str = "9.99") -> str:
    while True:
        raw = Prompt.ask(message, default=default)
        try:
            float(raw)
            return raw
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🐾 Contoso Pets",
        "[bold blue]Products CLI with Autocomplete[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    console.clear()
    console.print(create_header())

    refresh_products()

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "4", "✏️ Update product"),
            ("2", "ℹ️ Get product by ID", "5", "🗑️ Delete product"),
            ("3", "➕ Add product", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter(["1", "2", "3", "4", "5", "q", "quit", "exit"])
        ).strip()

        if choice == "1":
            products = refresh_products(success_msg="Products loaded successfully")
            if products is not None:
                show_products(products)

        elif choice == "2":
            pid = ask_product_id()
            if pid is not None:
                view_product(pid)

        elif choice == "3":
            name = prompt_with_autocomplete("Enter product name")
            price = ask_price("💰 Price in dollars")
            add_product(name, price)

        elif choice == "4":
            pid = ask_product_id()
            if pid is not None:
                current = view_product(pid)
                if current is not None:
                    name = prompt_with_autocomplete("Enter product name", default=current.get("name", ""))
                    price = ask_price("💰 Price in dollars", default=str(current.get("price", "9.99")))
                    change_product(pid, name, price)

        elif choice == "5":
            pid = ask_product_id()
            if pid is not None and Confirm.ask(f"[red]Delete product {pid}?[/red]"):
                remove_product(pid)

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Goodbye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
