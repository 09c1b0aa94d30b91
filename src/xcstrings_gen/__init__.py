from __future__ import annotations

__version__ = "0.1.0"

from .arguments import reconcile
from .catalog import Catalog, CatalogEntry, load_catalog, parse_catalog
from .errors import (
    CatalogError,
    ConfigError,
    GapError,
    GenerationError,
    NamespaceCollisionError,
    TypeConflictError,
)
from .escape import escape_for_string_literal
from .extractor import extract_resources
from .models import Argument, Literal, NamespaceNode, Placeholder, PlaceholderKind, Resource
from .parser import scan
from .swift_codegen import AccessLevel, generate_source
from .tree import build_tree

__all__ = [
    '__version__',
    'reconcile',
    'Catalog',
    'CatalogEntry',
    'load_catalog',
    'parse_catalog',
    'CatalogError',
    'ConfigError',
    'GapError',
    'GenerationError',
    'NamespaceCollisionError',
    'TypeConflictError',
    'escape_for_string_literal',
    'extract_resources',
    'Argument',
    'Literal',
    'NamespaceNode',
    'Placeholder',
    'PlaceholderKind',
    'Resource',
    'scan',
    'AccessLevel',
    'generate_source',
    'build_tree',
]
