"""Datasource plugin loading and registration.

A registry is an ordinary object: build one per run and pass it to the
renderer. There is no process-wide plugin state.
"""

from __future__ import annotations

import hashlib
import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from typing import Any

from vtiles.core.errors import RenderError

from .datasources import Datasource, GeoJSONDatasource

logger = logging.getLogger(__name__)

BUILTIN_DATASOURCES: tuple[type[Datasource], ...] = (GeoJSONDatasource,)


def plugin_module_name(path: Path) -> str:
    """``sys.modules`` key for a plugin file, unique per resolved path."""
    digest = hashlib.sha1(str(Path(path).resolve()).encode()).hexdigest()[:12]
    return f"vtiles_plugin_{Path(path).stem}_{digest}"


class DatasourceRegistry:
    """Registers datasource types and creates datasources by type name."""

    def __init__(self, include_builtins: bool = True) -> None:
        self._datasources: dict[str, type[Datasource]] = {}
        self._plugin_paths: list[Path] = []
        if include_builtins:
            for datasource_cls in BUILTIN_DATASOURCES:
                self.register(datasource_cls)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, datasource_cls: type[Datasource]) -> None:
        """Register a datasource class under its ``name``."""
        name = datasource_cls.name
        if not name:
            raise RenderError(f"Datasource {datasource_cls.__name__} has no name")
        if name in self._datasources:
            logger.info("Datasource type %r replaced by %s", name, datasource_cls.__name__)
        self._datasources[name] = datasource_cls

    def unregister(self, name: str) -> type[Datasource] | None:
        """Remove a datasource type. Returns the removed class or None."""
        return self._datasources.pop(name, None)

    def get(self, name: str) -> type[Datasource] | None:
        """Retrieve a datasource class by type name."""
        return self._datasources.get(name)

    @property
    def types(self) -> list[str]:
        """Registered type names, sorted."""
        return sorted(self._datasources)

    @property
    def plugin_paths(self) -> list[Path]:
        """Plugin files loaded so far, in load order."""
        return list(self._plugin_paths)

    @property
    def count(self) -> int:
        return len(self._datasources)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(self, params: dict[str, Any], base_dir: Path) -> Datasource:
        """Instantiate the datasource described by a stylesheet entry.

        Raises:
            RenderError: If the type is unknown or the datasource fails to open
        """
        type_name = params.get("type")
        datasource_cls = self._datasources.get(type_name) if type_name else None
        if datasource_cls is None:
            raise RenderError(
                f"Unknown datasource type {type_name!r} "
                f"(registered: {', '.join(self.types) or 'none'})"
            )
        try:
            return datasource_cls(params, base_dir)
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"Failed to open {type_name} datasource: {e}") from e

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    def load_plugin(self, path: str | Path) -> list[str]:
        """Load concrete Datasource subclasses from a Python file.

        Returns:
            Type names registered from the file

        Raises:
            RenderError: If the file is missing, fails to import, or defines
                no datasource
        """
        filepath = Path(path)
        if not filepath.is_file():
            raise RenderError(f"Datasource plugin {filepath} not found")

        module_name = plugin_module_name(filepath)
        spec = importlib.util.spec_from_file_location(module_name, filepath)
        if spec is None or spec.loader is None:
            raise RenderError(f"Cannot load datasource plugin {filepath}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise RenderError(f"Failed to import datasource plugin {filepath}: {e}") from e

        registered = []
        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if (
                inspect.isclass(attr)
                and issubclass(attr, Datasource)
                and attr is not Datasource
                and attr.__module__ == module_name
                and not getattr(attr, "__abstractmethods__", None)
            ):
                self.register(attr)
                registered.append(attr.name)

        if not registered:
            raise RenderError(f"Datasource plugin {filepath} defines no datasource")

        self._plugin_paths.append(filepath)
        logger.info("Loaded datasource plugin %s: %s", filepath, ", ".join(registered))
        return registered
