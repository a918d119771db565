"""
qtpods - Manage qmake pods as git submodules.

A pod is a third-party source dependency living in a git submodule of
your project, plus descriptive metadata kept in ``.podinfo``. qtpods
installs, removes and updates pods and keeps the generated qmake files
(pods.pri, pods-subdirs.pri, <repo>.pro) in step with the submodules.

Quick Start:
    from qtpods import PodService, Pod

    service = PodService()

    # Install a pod
    result = service.install_pod("/home/me/src/myapp", Pod("qt-json", "https://example.org/qt-json.git"))
    if not result.success:
        print(result.errors)

    # List installed pods
    for pod in service.list_installed_pods("/home/me/src/myapp"):
        print(pod.name, pod.url, pod.license)

    # Browse catalog sources
    for pod in service.list_available_pods(["https://example.org/pods.json"]):
        print(pod.name, pod.description)

Domain Objects:
    Pod - Dependency slot with metadata
    OperationResult - Tagged outcome of every mutating operation

Services:
    PodService - Install, remove, update, list, generate, check
"""

__version__ = "0.3.0"

# Domain objects
from .domain import (
    Pod,
    OperationResult,
    OperationStatus,
    FailureKind,
    PodOperationDetail,
    StepResult,
)

# Services
from .services import (
    PodService,
    CatalogService,
    ProjectFileService,
    PodValidator,
    SubmoduleGateway,
)

# Configuration
from .config import load_config, save_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "Pod",
    "OperationResult",
    "OperationStatus",
    "FailureKind",
    "PodOperationDetail",
    "StepResult",
    # Services
    "PodService",
    "CatalogService",
    "ProjectFileService",
    "PodValidator",
    "SubmoduleGateway",
    # Configuration
    "load_config",
    "save_config",
]
