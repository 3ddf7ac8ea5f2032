import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console()


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    # The request logging middleware already reports every request.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
