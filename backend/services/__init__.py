"""
Services package.

Provides business logic layer between API and core algorithms.

Modules:
    path_service: Catalog ownership and path selection for the API
"""

from services.path_service import (
    PathService,
    SelectionResult,
    DatasetNotLoaded,
    get_path_service,
)

__all__ = [
    'PathService',
    'SelectionResult',
    'DatasetNotLoaded',
    'get_path_service',
]
