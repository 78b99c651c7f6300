"""
Services Package - Administrative Service Layer

This package provides the catalog of API descriptors that feeds the
tool registry, and the OpenAPI import that produces descriptors.
"""

from src.services.catalog import ToolCatalog
from src.services.openapi import descriptor_from_openapi

__all__ = ["ToolCatalog", "descriptor_from_openapi"]
