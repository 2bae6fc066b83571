# cli.py
import os
import sys
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import PathCompleter, WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.productclient import ProductClient
import requests

console = Console()
c = ProductClient(base_url=os.getenv("PRODUCT_API_URL", "http://127.0.0.1:5000"))

status_message = "Ready"

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})

path_completer = PathCompleter(expanduser=True)


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title="🎬 Products",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=26)
    table.add_column("Title", style="bold", width=20)
    table.add_column("Description", width=30)
    table.add_column("Thumbnail", overflow="fold", width=30)
    table.add_column("Video", overflow="fold", width=30)

    for p in products:
        table.add_row(
            p.get("id") or "N/A",
            p.get("title") or "",
            p.get("description") or "",
            p.get("thumbnailUrl") or "[dim]-[/dim]",
            p.get("videoUrl") or "[dim]-[/dim]",
        )
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner and returns its result.
    Errors are printed and stored in status_message; None is returned.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Uploading..." if fn == c.create_product else "Loading...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except requests.exceptions.HTTPError as e:
        try:
            detail = e.response.json().get("error", e.response.text)
        except ValueError:
            detail = e.response.text
        status_message = f"Error: {detail}"
        console.print(show_status(status_message, False))
        return None
    except (requests.exceptions.RequestException, OSError) as e:
        status_message = f"Error: {e}"
        console.print(show_status(status_message, False))
        return None


# ---------------------------
# Input helpers
# ---------------------------
def ask(message: str, completer=None, default: str = "") -> str:
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_path(message: str) -> Optional[str]:
    while True:
        raw = ask(message, completer=path_completer).strip()
        if not raw:
            return None
        path = os.path.expanduser(raw)
        if os.path.isfile(path):
            return path
        console.print(f"[red]No such file: {path}[/red]")


def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🎬 Product Media",
        f"[bold blue]{c.base_url}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message

    console.clear()
    console.print(create_header())

    while True:
        if status_message:
            console.print(show_status(status_message, "Error" not in status_message))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_row("1", "📦 List products")
        menu_table.add_row("2", "➕ Create product")
        menu_table.add_row("q", "👋 Quit")
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = ask(
            "\nChoose an option",
            completer=WordCompleter(["1", "2", "q", "quit", "exit"])
        ).strip()

        if choice == "1":
            products = try_api(c.list_products, success_msg="Products loaded successfully")
            if products is not None:
                show_products(products)

        elif choice == "2":
            title = ask("Title (max 50)").strip() or None
            description = ask("Description (max 200)").strip() or None
            thumbnail = ask_path("Thumbnail image path (blank to skip)")
            video = ask_path("Video path (blank to skip)")
            product = try_api(
                c.create_product, title, description, thumbnail, video,
                success_msg=f"Product '{title or ''}' created"
            )
            if product:
                show_products([product])

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
