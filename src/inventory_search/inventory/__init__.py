"""Inventory row models and repositories."""

from inventory_search.inventory.domain import (
    RECORD_MODELS,
    Account,
    Address,
    AudioDevice,
    City,
    Client,
    Country,
    DeploymentVariant,
    EntityType,
    InstalledSoftware,
    InstalledSoftwareStatus,
    InventoryRecord,
    PhoneIntegration,
    Project,
    ProjectLifecycleStatus,
    Radio,
    Server,
    ServiceContract,
    Site,
    Software,
    UpgradePlan,
)
from inventory_search.inventory.repositories import (
    InMemoryRepository,
    JsonFileRepository,
    Repository,
    RepositoryError,
    load_repositories,
)

__all__ = [
    "RECORD_MODELS",
    "Account",
    "Address",
    "AudioDevice",
    "City",
    "Client",
    "Country",
    "DeploymentVariant",
    "EntityType",
    "InMemoryRepository",
    "InstalledSoftware",
    "InstalledSoftwareStatus",
    "InventoryRecord",
    "JsonFileRepository",
    "PhoneIntegration",
    "Project",
    "ProjectLifecycleStatus",
    "Radio",
    "Repository",
    "RepositoryError",
    "Server",
    "ServiceContract",
    "Site",
    "Software",
    "UpgradePlan",
    "load_repositories",
]
