import typer

from contract_proxy.cli.admin import clear_cache, stats
from contract_proxy.cli.catalog import resolve, types
from contract_proxy.cli.serve import serve

app = typer.Typer(
    name="contract-proxy",
    help="Contract Proxy CLI: mock REST API generated from TypeScript interfaces.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("serve")(serve)
app.command("types")(types)
app.command("resolve")(resolve)
app.command("stats")(stats)
app.command("clear-cache")(clear_cache)


def main() -> None:
    app()
