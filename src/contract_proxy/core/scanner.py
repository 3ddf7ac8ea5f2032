from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset({".ts", ".mts", ".cts", ".tsx"})

# Build, dependency and version-control directories never hold contracts.
_EXCLUDED_DIRECTORIES = frozenset(
    {
        "node_modules",
        "dist",
        "build",
        "coverage",
        "__pycache__",
        ".git",
        ".hg",
        ".svn",
    }
)


def is_definition_file(path: Path) -> bool:
    return path.suffix.lower() in SUPPORTED_EXTENSIONS and not path.name.startswith(".")


def is_excluded_directory(name: str) -> bool:
    return name in _EXCLUDED_DIRECTORIES or name.startswith(".")


def iter_definition_files(root: str | Path) -> Iterator[Path]:
    """Yield contract files below ``root``, depth first, in sorted order.

    A root that does not exist (yet) is an empty source, not an error.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        return

    stack = [root_path]
    while stack:
        current = stack.pop()
        try:
            entries = sorted(current.iterdir(), key=lambda p: p.name)
        except OSError:
            # Directory vanished or became unreadable between listing and descending.
            continue

        subdirectories: list[Path] = []
        for entry in entries:
            if entry.is_dir():
                if not is_excluded_directory(entry.name):
                    subdirectories.append(entry)
            elif entry.is_file() and is_definition_file(entry):
                yield entry

        # Reversed so the stack pops subdirectories in sorted order.
        stack.extend(reversed(subdirectories))
