"""
Asset Registry

Central store of imported assets with on-demand importing.

The registry knows every file below the assets directory, dispatches
files to importers by extension and owns everything the importers
produce. Other components never hold onto files; they ask the registry
by asset name or file name and it imports whatever is missing.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ..config.settings import ASSETS_DIR, IGNORABLE_FILES, IMPORT_ORDER, load_import_settings
from ..errors import AssetImportError, UnsupportedFileFormatError
from ..loaders.base import AssetImporter

logger = logging.getLogger(__name__)


class AssetRegistry:
    """
    Registry of importers and imported assets.

    Lifecycle:
    - register importers (``register_importer`` / ``register_default_importers``)
    - ``scan()`` the assets directory
    - import / retrieve assets
    - ``shutdown()`` to drop everything

    A file is claimed before its importer runs, so each file is imported
    at most once even when the import fails or triggers nested imports.
    """

    def __init__(self, assets_dir: Optional[Path] = None,
                 importers: Optional[Iterable[AssetImporter]] = None,
                 ignorable_files: Iterable[str] = IGNORABLE_FILES):
        """
        Initialize registry.

        Args:
            assets_dir: Root directory searched for asset files
            importers: Importers to register right away
            ignorable_files: File names never offered to an importer
        """
        self.assets_dir = Path(assets_dir) if assets_dir is not None else ASSETS_DIR
        self.ignorable_files = tuple(ignorable_files)

        self.importers: Dict[str, AssetImporter] = {}
        self.available_files: Dict[str, Path] = {}
        self.imported_files: Set[str] = set()

        self._assets: List[object] = []
        self._asset_ids: Set[int] = set()

        self._stats = {
            'imports': 0,
            'failed_imports': 0,
            'unsupported_files': 0,
            'retrieve_hits': 0,
            'retrieve_misses': 0,
        }

        for importer in importers or []:
            self.register_importer(importer)

    # ------------------------------------------------------------------
    # Importers
    # ------------------------------------------------------------------

    def register_importer(self, importer: AssetImporter) -> None:
        """
        Make an importer responsible for its file extensions.

        Raises:
            ValueError: An extension is already handled by another importer
        """
        for extension in importer.file_extensions:
            extension = extension.lower()
            if extension in self.importers:
                raise ValueError(
                    f"extension '{extension}' is already handled by {self.importers[extension]!r}"
                )

        for extension in importer.file_extensions:
            self.importers[extension.lower()] = importer

    def register_default_importers(self) -> None:
        """Register the importers for every built-in file format."""
        from ..loaders.idtech4_animation_loader import IdTech4AnimationLoader
        from ..loaders.idtech4_model_loader import IdTech4ModelLoader
        from ..loaders.texture_loader import TextureLoader
        from ..loaders.wavefront_material_loader import WavefrontMaterialLoader
        from ..loaders.wavefront_model_loader import WavefrontModelLoader

        for importer in (TextureLoader(), WavefrontMaterialLoader(), WavefrontModelLoader(),
                         IdTech4ModelLoader(), IdTech4AnimationLoader()):
            self.register_importer(importer)

    def importer_for(self, file) -> Optional[AssetImporter]:
        """Importer registered for a file's extension, if any."""
        return self.importers.get(Path(file).suffix.lower())

    def _extensions_for(self, asset_type: type) -> List[str]:
        return [
            extension for extension, importer in self.importers.items()
            if importer.asset_type is not None and issubclass(importer.asset_type, asset_type)
        ]

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def scan(self) -> Dict[str, Path]:
        """
        Record every importable file below the assets directory.

        Files are keyed by file name; the first one found wins when two
        directories hold the same name.

        Returns:
            Mapping of file name to path
        """
        self.available_files.clear()

        if not self.assets_dir.exists():
            logger.warning(f"Assets directory not found: {self.assets_dir}")
            return self.available_files

        for path in sorted(self.assets_dir.rglob("*")):
            if not path.is_file() or path.name in self.ignorable_files:
                continue
            if path.name in self.available_files:
                logger.debug(f"Ignoring {path}: shadowed by {self.available_files[path.name]}")
                continue
            self.available_files[path.name] = path

        logger.info(f"Found {len(self.available_files)} files in {self.assets_dir}")
        return self.available_files

    def _resolve_path(self, file) -> Optional[Path]:
        name = Path(file).name
        if name in self.available_files:
            return self.available_files[name]

        # Explicit paths outside the scanned tree
        path = Path(file)
        if path.is_file():
            return path
        return None

    # ------------------------------------------------------------------
    # Importing
    # ------------------------------------------------------------------

    def import_file(self, asset_type: type, file) -> None:
        """
        Import a file unless it was already claimed.

        Unsupported extensions and missing files are logged and ignored.

        Args:
            asset_type: Kind of asset expected from the file (for logging)
            file: File name, or a path to a file on disk

        Raises:
            AssetImportError: The importer rejected the file
        """
        name = Path(file).name
        if name in self.imported_files:
            return
        self.imported_files.add(name)

        importer = self.importer_for(name)
        if importer is None:
            self._stats['unsupported_files'] += 1
            error = UnsupportedFileFormatError(
                f"unsupported format ({Path(name).suffix or 'no extension'})", name
            )
            logger.warning(f"Asset skipped: {error}")
            return

        path = self._resolve_path(file)
        if path is None:
            logger.warning(f"Asset file not found: {name}")
            return

        try:
            importer.load(path, self)
        except AssetImportError:
            self._stats['failed_imports'] += 1
            raise

        self._stats['imports'] += 1
        logger.info(f"{getattr(asset_type, '__name__', asset_type)} imported: {name}")

    def import_by_name(self, asset_type: type, name: str) -> None:
        """Import the first available file called ``name`` + an extension of ``asset_type``."""
        for extension in self._extensions_for(asset_type):
            file = f"{name}{extension}"
            if file in self.available_files:
                self.import_file(asset_type, file)
                return

    def import_all(self, asset_type: Optional[type] = None) -> List[Tuple[str, AssetImportError]]:
        """
        Import every available file, or every file of one asset type.

        Without an asset type, kinds are imported in dependency order:
        textures, materials, models, animations. A failing file is logged
        and does not stop the batch.

        Returns:
            List of (file name, error) for files that failed
        """
        if asset_type is None:
            failures = []
            for kind in asset_types_in_import_order():
                failures.extend(self.import_all(kind))
            return failures

        failures = []
        extensions = self._extensions_for(asset_type)
        for name in sorted(self.available_files):
            if Path(name).suffix.lower() not in extensions or name in self.imported_files:
                continue
            try:
                self.import_file(asset_type, name)
            except AssetImportError as e:
                logger.error(f"Failed to import {name}: {e}", exc_info=logger.isEnabledFor(logging.DEBUG))
                failures.append((name, e))

        return failures

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, asset) -> None:
        """Take ownership of an asset (registering the same object twice is a no-op)."""
        if id(asset) in self._asset_ids:
            return
        self._asset_ids.add(id(asset))
        self._assets.append(asset)

    def register_many(self, assets: Iterable) -> None:
        """Register a batch of assets parsed from one file."""
        for asset in assets:
            self.register(asset)

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    def _find(self, asset_type: type, attribute: str, value):
        for asset in self._assets:
            if isinstance(asset, asset_type) and getattr(asset, attribute, None) == value:
                return asset
        return None

    def retrieve(self, asset_type: type, name: str):
        """
        Asset of a type by name, importing it on demand.

        Returns:
            The asset, or None when no file provides it
        """
        asset = self._find(asset_type, 'name', name)
        if asset is not None:
            self._stats['retrieve_hits'] += 1
            return asset

        self._stats['retrieve_misses'] += 1
        self.import_by_name(asset_type, name)
        return self._find(asset_type, 'name', name)

    def retrieve_file(self, asset_type: type, file: str):
        """
        Asset of a type by source file name, importing the file on demand.

        Returns:
            The asset, or None when the file is unavailable
        """
        asset = self._find(asset_type, 'file', file)
        if asset is not None:
            self._stats['retrieve_hits'] += 1
            return asset

        self._stats['retrieve_misses'] += 1
        self.import_file(asset_type, file)
        return self._find(asset_type, 'file', file)

    def retrieve_all(self, asset_type: type = object) -> List:
        """Every registered asset of a type, in registration order."""
        return [asset for asset in self._assets if isinstance(asset, asset_type)]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def get_stats(self) -> Dict:
        """
        Get registry statistics.

        Returns:
            Dictionary with import and lookup counters
        """
        return {
            'num_assets': len(self._assets),
            'num_available_files': len(self.available_files),
            'num_imported_files': len(self.imported_files),
            **self._stats,
        }

    def shutdown(self) -> None:
        """Drop every asset and all bookkeeping."""
        self._assets.clear()
        self._asset_ids.clear()
        self.imported_files.clear()
        self.available_files.clear()
        for key in self._stats:
            self._stats[key] = 0

    def __len__(self):
        return len(self._assets)

    def __repr__(self):
        return (f"AssetRegistry(assets_dir='{self.assets_dir}', "
                f"importers={len(self.importers)}, assets={len(self._assets)})")


def asset_types_in_import_order() -> List[type]:
    """Asset classes in the order bulk imports process them."""
    from ..animation.animation import Animation
    from ..loaders.material import Material
    from ..loaders.model import Model
    from ..loaders.texture import Texture

    kinds = {
        "Texture": Texture,
        "Material": Material,
        "Model": Model,
        "Animation": Animation,
    }
    return [kinds[name] for name in IMPORT_ORDER]


def create_default_registry(assets_dir: Optional[Path] = None, scan: bool = True) -> AssetRegistry:
    """
    Build a registry with the built-in importers.

    Args:
        assets_dir: Assets directory (default: from the import settings)
        scan: Scan the assets directory right away

    Returns:
        Ready-to-use AssetRegistry
    """
    settings = load_import_settings()
    registry = AssetRegistry(
        assets_dir=assets_dir if assets_dir is not None else settings["assets_dir"],
        ignorable_files=settings["ignorable_files"],
    )
    registry.register_default_importers()

    if scan:
        registry.scan()
    return registry
