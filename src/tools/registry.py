"""
Tool Registry

This module implements the registry of compiled tools. The registry is the
only shared mutable state of the dispatch engine; one instance is created by
the application lifespan and injected wherever it is needed.

Concurrency discipline (copy-on-write):
- Writers (register, unregister, replace_for_source, remove_source) are
  serialized by a lock. Each builds a new mapping and swaps it in with a
  single reference assignment.
- Readers (get, list, has, sources) read the current mapping without
  locking. A published mapping is never mutated, so readers always see
  either the complete old state or the complete new state.

Every entry is attributed to a source (the API descriptor it was compiled
from). A name owned by one source cannot be taken over by another; the
owning source replaces its own tools through replace_for_source().

Pattern: Service Registry
Pattern: Copy-on-write snapshot for lock-free reads
"""

import logging
import threading
from collections.abc import Iterable
from types import MappingProxyType
from typing import Mapping, Optional

from src.core.exceptions import NameCollisionError, ToolNotFoundError
from src.models.domain import ToolDescriptor

logger = logging.getLogger(__name__)


# =============================================================================
# ToolRegistry Class
# =============================================================================


class ToolRegistry:
    """
    Registry mapping tool names to tool descriptors.

    Attributes:
        _tools: Current published mapping of name -> ToolDescriptor.
        _write_lock: Serializes writers.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.replace_for_source("shop", compiled_tools)
        >>> tool = registry.get("shop_get__items")
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._tools: Mapping[str, ToolDescriptor] = MappingProxyType({})
        self._write_lock = threading.Lock()

    def _publish(self, tools: dict[str, ToolDescriptor]) -> None:
        self._tools = MappingProxyType(tools)

    # =========================================================================
    # Writers
    # =========================================================================

    def register(self, tool: ToolDescriptor) -> None:
        """
        Insert or replace a tool keyed by its name.

        Replacing is allowed only when the existing entry has the same
        source as the new one.

        Args:
            tool: The tool descriptor to register.

        Raises:
            NameCollisionError: If the name belongs to a different source.
        """
        with self._write_lock:
            existing = self._tools.get(tool.name)
            if existing is not None and existing.source_id != tool.source_id:
                raise NameCollisionError(
                    tool.name,
                    source_id=tool.source_id,
                    existing_source_id=existing.source_id,
                )
            updated = dict(self._tools)
            updated[tool.name] = tool
            self._publish(updated)
        logger.debug(f"Registered tool: {tool.name} (source={tool.source_id})")

    def unregister(self, name: str) -> None:
        """
        Remove a tool from the registry.

        Does not raise an error if the tool doesn't exist.
        """
        with self._write_lock:
            if name not in self._tools:
                return
            updated = dict(self._tools)
            del updated[name]
            self._publish(updated)
        logger.debug(f"Unregistered tool: {name}")

    def replace_for_source(
        self, source_id: str, tools: Iterable[ToolDescriptor]
    ) -> list[str]:
        """
        Atomically replace every tool attributed to a source.

        All collision checks happen before anything is published, so either
        the whole new set is installed (and the whole old set removed) or the
        registry is left untouched.

        Args:
            source_id: The source whose tools are replaced.
            tools: The complete new set of tools for the source. Their
                source_id must be source_id (or unset, in which case it is
                assigned).

        Returns:
            Names of the tools now registered for the source.

        Raises:
            NameCollisionError: If a new name is owned by another source or
                appears twice in the new set.
        """
        new_tools: dict[str, ToolDescriptor] = {}
        for tool in tools:
            if tool.source_id != source_id:
                tool = tool.model_copy(update={"source_id": source_id})
            if tool.name in new_tools:
                raise NameCollisionError(
                    tool.name, source_id=source_id, existing_source_id=source_id
                )
            new_tools[tool.name] = tool

        with self._write_lock:
            current = self._tools
            for name in new_tools:
                existing = current.get(name)
                if existing is not None and existing.source_id != source_id:
                    raise NameCollisionError(
                        name,
                        source_id=source_id,
                        existing_source_id=existing.source_id,
                    )
            updated = {
                name: tool
                for name, tool in current.items()
                if tool.source_id != source_id
            }
            updated.update(new_tools)
            self._publish(updated)

        logger.info(
            f"Replaced tools for source {source_id}: {len(new_tools)} registered"
        )
        return list(new_tools)

    def remove_source(self, source_id: str) -> int:
        """
        Remove every tool attributed to a source.

        Returns:
            Number of tools removed.
        """
        with self._write_lock:
            current = self._tools
            updated = {
                name: tool
                for name, tool in current.items()
                if tool.source_id != source_id
            }
            removed = len(current) - len(updated)
            if removed:
                self._publish(updated)
        logger.info(f"Removed {removed} tools for source {source_id}")
        return removed

    # =========================================================================
    # Readers
    # =========================================================================

    def get(self, name: str) -> ToolDescriptor:
        """
        Get a registered tool by name.

        Raises:
            ToolNotFoundError: If the tool is not registered.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def list(self) -> tuple[ToolDescriptor, ...]:
        """
        Snapshot of all registered tools.

        Returns:
            Tuple of ToolDescriptor instances; order is not significant.
        """
        return tuple(self._tools.values())

    def has(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._tools

    def tools_for_source(self, source_id: str) -> tuple[ToolDescriptor, ...]:
        """Snapshot of the tools attributed to a source."""
        return tuple(t for t in self._tools.values() if t.source_id == source_id)

    def sources(self) -> set[Optional[str]]:
        """Source IDs that currently own at least one tool."""
        return {t.source_id for t in self._tools.values()}

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
