"""
Service layer for qtpods.

Contains business logic that orchestrates domain objects and infrastructure:
- PodService: Install, remove, update and list pods
- SubmoduleGateway: Git submodule command sequences
- CatalogService: Installed and available pod listings
- ProjectFileService: Generated qmake include files
- PodValidator: Pod layout checks

Services are the primary API for commands to use.
"""

from .catalog_service import CatalogService, parse_catalog, read_submodules
from .pod_service import PodService
from .pod_validator import PodValidator
from .project_file_service import ProjectFileService
from .submodule_gateway import SubmoduleGateway

__all__ = [
    'PodService',
    'SubmoduleGateway',
    'CatalogService',
    'ProjectFileService',
    'PodValidator',
    'parse_catalog',
    'read_submodules',
]
