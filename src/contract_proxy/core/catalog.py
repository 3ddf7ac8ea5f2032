from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from contract_proxy.core.extract import RegexShapeExtractor, Shape
from contract_proxy.core.ports.extractor import ShapeExtractor
from contract_proxy.core.scanner import iter_definition_files
from contract_proxy.errors import ExtractionSkipped
from contract_proxy.models import TypeCatalog, TypeDescriptor

logger = logging.getLogger(__name__)


def extract_shapes_from_file(path: Path, extractor: ShapeExtractor) -> list[Shape]:
    """Read ``path`` and extract its shapes, raising ``ExtractionSkipped`` on any failure."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ExtractionSkipped(str(path), str(exc)) from exc

    try:
        return extractor.extract(content)
    except Exception as exc:
        raise ExtractionSkipped(str(path), f"{type(exc).__name__}: {exc}") from exc


def build_catalog(directories: Iterable[str | Path], extractor: ShapeExtractor | None = None) -> TypeCatalog:
    """Scan ``directories`` in priority order and return a fresh catalog.

    The first directory (and, within a directory, the first file in scan order)
    that declares a name owns it; later declarations of the same name are dropped.
    """
    extractor = extractor or RegexShapeExtractor()
    ordered = tuple(str(directory) for directory in directories)
    types: dict[str, TypeDescriptor] = {}
    skipped = 0

    for directory in ordered:
        for path in iter_definition_files(directory):
            try:
                shapes = extract_shapes_from_file(path, extractor)
            except ExtractionSkipped as exc:
                skipped += 1
                logger.warning("%s", exc)
                continue

            for name, fields in shapes:
                existing = types.get(name)
                if existing is not None:
                    logger.debug("Type %s in %s shadowed by %s", name, path, existing.source_file)
                    continue
                types[name] = TypeDescriptor(name=name, source_file=str(path), fields=fields)

    logger.debug("Built catalog with %d type(s) from %d director(ies), %d file(s) skipped", len(types), len(ordered), skipped)
    return TypeCatalog(types, directories=ordered)
