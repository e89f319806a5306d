"""
Batch scanning of blueprint documents.

Provides a high-level API that loads documents, collects their references and
resolves the mods they need, for one document or for many files in parallel.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, Mapping, Optional

from ..blueprint import Book, Document, UsedIDs
from ..mods.catalog import DEFAULT_CATALOG, PackageCatalog, Preset, find_preset
from ..mods.versions import DependencyList
from ..settings.scanner import DEFAULT_MAX_WORKERS
from ..tags import AnyBasic, dump_tag_table
from .loaders import DocumentFileLoader
from .resolver import Resolution, extract_startup_settings, resolve_with_source

if TYPE_CHECKING:
    from ..settings import AppSettings


@dataclass
class ScanResult:
    """Everything the scanner learned about one document."""

    label: str
    kind: str
    game_version: str
    dependencies: DependencyList
    references: UsedIDs
    startup_settings: Optional[Mapping[str, AnyBasic]] = None
    explicit: bool = False
    source: Optional[Path] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly summary."""
        data: Dict[str, Any] = {
            "label": self.label,
            "kind": self.kind,
            "game_version": self.game_version,
            "explicit": self.explicit,
            "dependencies": self.dependencies.to_dict(),
        }
        if self.source is not None:
            data["source"] = str(self.source)
        if self.startup_settings is not None:
            data["startup_settings"] = dump_tag_table(self.startup_settings)
        return data


@dataclass
class ScanReport:
    """Results of a batch scan; failed files are listed in ``errors``."""

    results: Dict[Path, ScanResult] = field(default_factory=lambda: {})
    errors: Dict[Path, str] = field(default_factory=lambda: {})

    @property
    def ok(self) -> bool:
        return not self.errors


class ScannerService:
    """Service for scanning blueprint documents.

    Dependency resolution follows resolve_dependencies: a preset configured
    as the default wins, then explicit author metadata, then prefix
    detection against the catalog.
    """

    def __init__(
        self,
        settings: Optional["AppSettings"] = None,
        catalog: PackageCatalog = DEFAULT_CATALOG,
        loader: Optional[DocumentFileLoader] = None,
    ):
        """Initialize the scanner.

        Args:
            settings: App settings for worker count and default preset
            catalog: Preset catalog used for detection
            loader: Document loader (defaults to DocumentFileLoader)
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings
        self.catalog = catalog
        self.loader = loader or DocumentFileLoader()

        self.max_workers = DEFAULT_MAX_WORKERS
        self.preset: Optional[Preset] = None
        if settings is not None:
            self.max_workers = settings.scanner.max_workers
            preset_name = settings.scanner.default_preset
            if preset_name:
                self.preset = find_preset(preset_name, catalog)
                if self.preset is None:
                    self.logger.warning(f"Unknown default preset '{preset_name}', ignoring")

        self.logger.debug(
            f"ScannerService initialized (workers: {self.max_workers}, "
            f"preset: {self.preset.name if self.preset else 'auto'})"
        )

    # === REFERENCES ===

    def get_references(self, document: Document, parallel: bool = True) -> UsedIDs:
        """Collect references, walking the children of a book concurrently.

        The result is identical to ``document.get_ids()``; partial sets are
        merged in completion order.
        """
        if not parallel or not isinstance(document, Book) or len(document.documents) < 2:
            return document.get_ids()

        ids = document.icons.get_ids()
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(child.walk_ids, {id(document)})
                for child in document.documents
            ]
            for future in as_completed(futures):
                ids.merge(future.result())
        return ids

    # === SCANNING ===

    def scan(
        self,
        document: Document,
        source: Optional[Path] = None,
        preset: Optional[Preset] = None,
    ) -> ScanResult:
        """Scan one parsed document.

        Args:
            document: Parsed document
            source: File the document came from, if any
            preset: Preset forced for this scan (overrides the default)
        """
        references = self.get_references(document)
        dependencies, resolution = resolve_with_source(
            document, self.catalog, preset or self.preset, references
        )

        result = ScanResult(
            label=document.label,
            kind=document.kind.value,
            game_version=document.version_string(),
            dependencies=dependencies,
            references=references,
            startup_settings=extract_startup_settings(document),
            explicit=resolution is Resolution.EXPLICIT,
            source=source,
        )
        self.logger.info(
            f"Scanned {result.kind} '{result.label}': {len(dependencies)} mod(s)"
            f"{' (explicit)' if result.explicit else ''}"
        )
        return result

    def scan_file(self, path: Path, preset: Optional[Preset] = None) -> ScanResult:
        """Load and scan one file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is not a valid document
        """
        return self.scan(self.loader.load(path), source=path, preset=preset)

    def scan_files(
        self, paths: Iterable[Path], preset: Optional[Preset] = None
    ) -> ScanReport:
        """Load and scan many files in a thread pool.

        A file that fails to load is logged and reported in the report's
        ``errors``; it never aborts the batch.
        """
        report = ScanReport()
        path_list = list(paths)
        if not path_list:
            self.logger.warning("No files to scan")
            return report

        self.logger.info(f"Scanning {len(path_list)} file(s) with {self.max_workers} worker(s)")

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_path = {
                executor.submit(self.scan_file, path, preset): path for path in path_list
            }
            for future in as_completed(future_to_path):
                path = future_to_path[future]
                try:
                    report.results[path] = future.result()
                except (OSError, ValueError) as e:
                    self.logger.error(f"Error scanning {path}: {e}")
                    report.errors[path] = str(e)

        self.logger.info(
            f"Scan completed: {len(report.results)} ok, {len(report.errors)} failed"
        )
        return report
