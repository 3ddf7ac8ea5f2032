"""Type resolution and routing engine.

The engine owns the published ``TypeCatalog`` snapshot, the ``SchemaCache``
and the ``WatchCoordinator``. It is constructed explicitly and handed to the
serving layer; several engines can live side by side in one process.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from contract_proxy.core.cache import SchemaCache
from contract_proxy.core.catalog import build_catalog
from contract_proxy.core.coordinator import WatchCoordinator
from contract_proxy.core.extract import RegexShapeExtractor
from contract_proxy.core.gate import Decision, MockProxyGate
from contract_proxy.core.ports.extractor import ShapeExtractor
from contract_proxy.core.ports.generator import MockGenerator
from contract_proxy.core.resolver import URLResolver
from contract_proxy.errors import MockGenerationFailure, TypeNotFound
from contract_proxy.generator.faker_adapter import FakerMockGenerator
from contract_proxy.models import RouteMapping, TypeCatalog, TypeDescriptor

logger = logging.getLogger(__name__)


class Engine:
    def __init__(
        self,
        directories: Sequence[str | Path],
        *,
        extractor: ShapeExtractor | None = None,
        cache: SchemaCache | None = None,
        generator: MockGenerator | None = None,
        target_url: str | None = None,
    ) -> None:
        self.directories = tuple(str(Path(directory).resolve()) for directory in directories)
        self.extractor = extractor or RegexShapeExtractor()
        self.cache = cache if cache is not None else SchemaCache()
        self.resolver = URLResolver()
        self.gate = MockProxyGate(target_url)
        self.generator: MockGenerator = generator or FakerMockGenerator()
        self._build_lock = threading.Lock()
        self._catalog = TypeCatalog(directories=self.directories)
        self.coordinator = WatchCoordinator(self.cache, self.rebuild)

    @property
    def catalog(self) -> TypeCatalog:
        """The currently published snapshot. Grab it once per request."""
        return self._catalog

    def rebuild(self) -> TypeCatalog:
        """Rescan every directory and publish the new catalog in one reference swap."""
        with self._build_lock:
            catalog = build_catalog(self.directories, self.extractor)
            self._catalog = catalog
        logger.info("Catalog published: %d type(s)", len(catalog))
        return catalog

    def lookup(self, name: str) -> TypeDescriptor | None:
        return self._catalog.lookup(name)

    def route(self, path: str, catalog: TypeCatalog | None = None) -> RouteMapping | None:
        resolved = self.resolver.resolve(path)
        descriptor = (catalog if catalog is not None else self._catalog).lookup(resolved.type_name)
        if descriptor is None:
            return None
        return RouteMapping(type_name=resolved.type_name, is_array=resolved.is_array, source_file=descriptor.source_file)

    def decide(self, mapping: RouteMapping | None) -> Decision:
        return self.gate.decide(mapping)

    def mock_payload(
        self, path: str, catalog: TypeCatalog | None = None
    ) -> tuple[RouteMapping, dict[str, Any] | list[dict[str, Any]]]:
        """Resolve ``path`` and return generated data for it.

        Singular routes go through the cache; list routes are regenerated on
        every call. Raises ``TypeNotFound`` or ``MockGenerationFailure``.
        """
        catalog = catalog if catalog is not None else self._catalog
        mapping = self.route(path, catalog)
        if mapping is None:
            raise TypeNotFound(path, self.resolver.resolve(path).type_name)
        descriptor = catalog[mapping.type_name]

        if mapping.is_array:
            return mapping, self._generate(descriptor, catalog, many=True)

        cached = self.cache.get(mapping.type_name, mapping.source_file)
        if cached is not None:
            return mapping, cached
        payload = self._generate(descriptor, catalog, many=False)
        # Payloads built from a superseded snapshot are served once but never cached.
        if catalog is self._catalog:
            self.cache.set(mapping.type_name, mapping.source_file, payload)
        return mapping, payload

    def _generate(self, descriptor: TypeDescriptor, catalog: TypeCatalog, many: bool) -> Any:
        try:
            if many:
                return self.generator.generate_many(descriptor, catalog)
            return self.generator.generate(descriptor, catalog)
        except Exception as exc:
            raise MockGenerationFailure(descriptor.name, str(exc) or type(exc).__name__) from exc
