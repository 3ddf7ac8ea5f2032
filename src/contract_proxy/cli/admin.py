"""Commands talking to the admin endpoints of a running server."""

from __future__ import annotations

from typing import Annotated, Any

import httpx
import typer

from contract_proxy.cli.console import console

UrlOption = Annotated[
    str, typer.Option("--url", help="Base URL of the running server.", envvar="CONTRACT_PROXY_URL")
]

_DEFAULT_URL = "http://127.0.0.1:8080"


def _request(method: str, url: str) -> Any:
    try:
        response = httpx.request(method, url, timeout=10.0)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        console.print(f"[red]Could not reach {url}: {exc}[/red]")
        raise typer.Exit(1) from exc
    return response.json()


def stats(url: UrlOption = _DEFAULT_URL) -> None:
    """Display cache statistics of a running server."""
    data = _request("GET", f"{url.rstrip('/')}/_admin/cache")

    console.print("\n[bold]Cache Statistics[/bold]")
    console.print(f"   Enabled: {data['enabled']}")
    console.print(f"   Size: {data['size']} schema(s)\n")
    if data["schemas"]:
        console.print("   Cached schemas:")
        for schema in data["schemas"]:
            console.print(f"   - {schema['type_name']} ({schema['source_file']})")
            console.print(f"     Age: {round(schema['age'])}s")


def clear_cache(url: UrlOption = _DEFAULT_URL) -> None:
    """Clear the schema cache of a running server."""
    data = _request("DELETE", f"{url.rstrip('/')}/_admin/cache")
    console.print(f"[green]Cache cleared successfully[/green] ({data['removed']} schema(s) removed)")
