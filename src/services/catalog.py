"""
Tool Catalog Service

This module provides the administrative side of the gateway: registering,
recompiling and removing API descriptors. Each descriptor is compiled and
its tools replace the previous generation for that descriptor in one atomic
registry operation, so concurrent invocations never observe a half-updated
API.

The catalog also remembers the last accepted version of every descriptor so
that a descriptor can be re-registered on request without resubmitting it.

Pattern: Service layer over the registry
Pattern: Dependency injection (registry and adapters are injected)
"""

import json
import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

from src.core.exceptions import InvalidRequestError, ToolGatewayException
from src.models.descriptors import ApiDescriptor
from src.models.responses import RegistrationResult
from src.services.openapi import descriptor_from_openapi
from src.tools.compiler import CompilerAdapters, compile_descriptor
from src.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


# =============================================================================
# ToolCatalog Service
# =============================================================================


class ToolCatalog:
    """
    Service for managing API descriptors and their compiled tools.

    Attributes:
        registry: Registry the compiled tools are published to.
        adapters: Adapters captured by compiled bindings.
    """

    def __init__(self, registry: ToolRegistry, adapters: CompilerAdapters) -> None:
        """
        Initialize ToolCatalog.

        Args:
            registry: Registry the compiled tools are published to.
            adapters: Adapters captured by compiled bindings.
        """
        self.registry = registry
        self.adapters = adapters
        self._descriptors: dict[str, ApiDescriptor] = {}
        self._lock = threading.Lock()

    # =========================================================================
    # Registration
    # =========================================================================

    def register_descriptor(
        self, descriptor: Union[ApiDescriptor, Mapping[str, Any]]
    ) -> RegistrationResult:
        """
        Compile a descriptor and publish its tools.

        A disabled descriptor is accepted but contributes no tools; any tools
        previously compiled from it are removed.

        Args:
            descriptor: Validated descriptor or its raw JSON form.

        Returns:
            RegistrationResult listing the descriptor's tools.

        Raises:
            InvalidDescriptorError: If the descriptor fails validation or
                compilation. The registry is left unchanged.
            NameCollisionError: If a compiled name belongs to another
                descriptor. The registry is left unchanged.
        """
        if not isinstance(descriptor, ApiDescriptor):
            descriptor = ApiDescriptor.parse(dict(descriptor))

        with self._lock:
            if descriptor.enabled:
                tools = compile_descriptor(descriptor, self.adapters)
                names = self.registry.replace_for_source(descriptor.id, tools)
            else:
                self.registry.remove_source(descriptor.id)
                names = []
            self._descriptors[descriptor.id] = descriptor

        logger.info(
            f"Registered API descriptor {descriptor.id} ({descriptor.type.value}) "
            f"with {len(names)} tools"
        )
        return RegistrationResult(api_id=descriptor.id, tool_count=len(names), tools=names)

    def import_openapi(
        self,
        document: Mapping[str, Any],
        api_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> RegistrationResult:
        """
        Convert an OpenAPI document into a REST descriptor and register it.

        Raises:
            InvalidDescriptorError: If the document defines no operations or
                the converted descriptor does not compile.
            NameCollisionError: If a compiled name belongs to another
                descriptor.
        """
        descriptor = descriptor_from_openapi(
            document, api_id, name=name, description=description, base_url=base_url
        )
        return self.register_descriptor(descriptor)

    def reregister(self, api_id: str) -> RegistrationResult:
        """
        Recompile a previously accepted descriptor.

        Raises:
            InvalidRequestError: If no descriptor with this ID is known.
        """
        descriptor = self.get_descriptor(api_id)
        if descriptor is None:
            raise InvalidRequestError(f"Unknown API descriptor: {api_id}")
        return self.register_descriptor(descriptor)

    def remove_descriptor(self, api_id: str) -> int:
        """
        Remove a descriptor and all tools compiled from it.

        Returns:
            Number of tools removed. Unknown IDs remove nothing.
        """
        with self._lock:
            self._descriptors.pop(api_id, None)
            removed = self.registry.remove_source(api_id)
        logger.info(f"Removed API descriptor {api_id} ({removed} tools)")
        return removed

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_descriptor(self, api_id: str) -> Optional[ApiDescriptor]:
        """Get the last accepted version of a descriptor."""
        return self._descriptors.get(api_id)

    def descriptors(self) -> list[ApiDescriptor]:
        """List all accepted descriptors."""
        return list(self._descriptors.values())

    # =========================================================================
    # Bulk Loading
    # =========================================================================

    def load_from_file(self, path: Union[str, Path]) -> list[RegistrationResult]:
        """
        Register every descriptor in a JSON file of the form ``{"apis": [...]}``.

        Descriptors are registered independently: an invalid or colliding
        descriptor is logged and skipped without affecting the others.

        Args:
            path: Path to the descriptors file.

        Returns:
            Results for the descriptors that were registered.
        """
        file_path = Path(path)
        if not file_path.exists():
            logger.warning(f"Descriptors file not found: {file_path}")
            return []

        try:
            document = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Could not read descriptors file {file_path}: {e}")
            return []

        entries = document.get("apis", []) if isinstance(document, dict) else []
        results: list[RegistrationResult] = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                logger.warning(f"Skipping descriptor {index}: not an object")
                continue
            try:
                results.append(self.register_descriptor(entry))
            except ToolGatewayException as e:
                logger.warning(
                    f"Skipping descriptor {entry.get('id', index)}: "
                    f"{e.error_code.value}: {e.message}"
                )

        logger.info(
            f"Loaded {len(results)} of {len(entries)} API descriptors from {file_path}"
        )
        return results
