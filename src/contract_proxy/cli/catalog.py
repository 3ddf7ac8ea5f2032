from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from contract_proxy.cli.console import console
from contract_proxy.core.catalog import build_catalog
from contract_proxy.core.resolver import resolve as resolve_path

DirectoryOption = Annotated[
    Path, typer.Option("--dir", "-d", help="Path to contracts directory.", envvar="CONTRACT_PROXY_DIR")
]
ExternalDirOption = Annotated[
    list[Path] | None,
    typer.Option("--external-dir", "-e", help="External directory to scan for types (repeatable)."),
]


def _directories(directory: Path, external_dir: list[Path] | None) -> list[Path]:
    return [directory, *(external_dir or [])]


def types(
    directory: DirectoryOption = Path("contracts"),
    external_dir: ExternalDirOption = None,
) -> None:
    """List the types found in the contract directories."""
    catalog = build_catalog(_directories(directory, external_dir))

    table = Table()
    table.add_column("Type", no_wrap=True)
    table.add_column("Fields", justify="right")
    table.add_column("Source", overflow="fold")
    for name in sorted(catalog):
        descriptor = catalog[name]
        table.add_row(name, str(len(descriptor.fields)), descriptor.source_file)
    console.print(table)
    console.print(f"({len(catalog)} types)")


def resolve(
    path: Annotated[str, typer.Argument(help="Request path, e.g. /api/v1/users.")],
    directory: DirectoryOption = Path("contracts"),
    external_dir: ExternalDirOption = None,
) -> None:
    """Show which type a request path maps to."""
    resolved = resolve_path(path)
    kind = "array" if resolved.is_array else "single"
    console.print(f"{path} -> [bold]{resolved.type_name or '(none)'}[/bold] ({kind})")

    descriptor = build_catalog(_directories(directory, external_dir)).lookup(resolved.type_name)
    if descriptor is None:
        console.print("[yellow]Not in catalog: requests are answered with 404 or forwarded.[/yellow]")
        raise typer.Exit(1)
    console.print(f"[green]Found[/green] in {descriptor.source_file}")
