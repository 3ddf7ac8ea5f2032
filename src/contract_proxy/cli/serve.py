from pathlib import Path
from typing import Annotated

import typer

from contract_proxy.cli.console import configure_logging, console
from contract_proxy.config import ParserName, ServerConfig, latency_or_none
from contract_proxy.errors import DirectoryUnavailable


def serve(
    directory: Annotated[
        Path, typer.Option("--dir", "-d", help="Path to contracts directory.", envvar="CONTRACT_PROXY_DIR")
    ] = Path("contracts"),
    external_dir: Annotated[
        list[Path] | None,
        typer.Option("--external-dir", "-e", help="External directory to scan for types (repeatable)."),
    ] = None,
    host: Annotated[str, typer.Option(help="Interface to bind.", envvar="CONTRACT_PROXY_HOST")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Server port.", envvar="CONTRACT_PROXY_PORT")] = 8080,
    target: Annotated[
        str | None,
        typer.Option("--target", "-t", help="Target URL for proxy mode.", envvar="CONTRACT_PROXY_TARGET"),
    ] = None,
    latency: Annotated[
        str | None, typer.Option("--latency", "-l", help='Simulate latency in ms, e.g. "500-2000".')
    ] = None,
    hot_reload: Annotated[bool, typer.Option("--hot-reload/--no-hot-reload", help="Reload contracts on change.")] = True,
    cache: Annotated[bool, typer.Option("--cache/--no-cache", help="Cache singular mock responses.")] = True,
    parser: Annotated[
        str, typer.Option(help="Shape extractor: 'regex' or 'tree-sitter'.", envvar="CONTRACT_PROXY_PARSER")
    ] = "regex",
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False,
) -> None:
    """Start the mock server."""
    import uvicorn

    from contract_proxy.api.app import create_app

    configure_logging(verbose)

    if parser not in ("regex", "tree-sitter"):
        console.print(f"[red]Unknown parser {parser!r}. Use 'regex' or 'tree-sitter'.[/red]")
        raise typer.Exit(2)
    parser_name: ParserName = "tree-sitter" if parser == "tree-sitter" else "regex"

    config = ServerConfig(
        contracts_dir=directory.resolve(),
        external_dirs=[path.resolve() for path in external_dir or []],
        host=host,
        port=port,
        target_url=target,
        latency=latency_or_none(latency),
        hot_reload=hot_reload,
        cache=cache,
        verbose=verbose,
        parser=parser_name,
    )

    try:
        config.prepare_directories()
    except DirectoryUnavailable as exc:
        console.print(f"[red]{exc}[/red]")
        console.print("Make sure the path is correct and accessible.")
        raise typer.Exit(1) from exc

    app = create_app(config)

    console.print(f"[green]Contract Proxy started on http://{host}:{port}[/green]")
    console.print(f"  Contracts directory: {config.contracts_dir}")
    for extra in config.external_dirs:
        console.print(f"  External directory:  {extra}")
    if config.target_url:
        console.print(f"  Proxy target:        {config.target_url}")
    if config.latency:
        console.print(f"  Latency simulation:  {config.latency.min_ms}-{config.latency.max_ms}ms")
    console.print(f"  Schema cache:        {'enabled' if config.cache else 'disabled'}")
    console.print(f"  API documentation:   http://{host}:{port}/api-docs")
    console.print(f"  OpenAPI document:    http://{host}:{port}/api-docs/openapi.json")

    uvicorn.run(app, host=host, port=port, log_config=None)
