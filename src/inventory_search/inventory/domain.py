"""Row models for the inventory entities that feed the search index."""

from datetime import date
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EntityType(str, Enum):
    """Entity tags, also used as document types in the index."""

    ACCOUNT = "account"
    ADDRESS = "address"
    AUDIO_DEVICE = "audioDevice"
    CITY = "city"
    CLIENT = "client"
    COUNTRY = "country"
    DEPLOYMENT_VARIANT = "deploymentVariant"
    INSTALLED_SOFTWARE = "installedSoftware"
    PHONE_INTEGRATION = "phoneIntegration"
    PROJECT = "project"
    RADIO = "radio"
    SERVER = "server"
    SERVICE_CONTRACT = "serviceContract"
    SITE = "site"
    SOFTWARE = "software"
    UPGRADE_PLAN = "upgradePlan"

    @property
    def label(self) -> str:
        """Human-readable name, e.g. "Audio Device"."""
        words: list[str] = []
        for ch in self.value:
            if ch.isupper() or not words:
                words.append(ch.upper())
            else:
                words[-1] += ch
        return " ".join(words)


class InstalledSoftwareStatus(str, Enum):
    """Lifecycle of a software installation on a site."""

    OFFERED = "Offered"
    INSTALLED = "Installed"
    REJECTED = "Rejected"
    OUTDATED = "Outdated"

    @property
    def label(self) -> str:
        return _INSTALLED_SOFTWARE_LABELS[self]

    @classmethod
    def parse(cls, value: str | None) -> "InstalledSoftwareStatus":
        """Resolve a stored status value, case-insensitively.

        Args:
            value: Stored status; blank values mean Offered.

        Returns:
            Matching status.

        Raises:
            ValueError: If the value is not a known status.
        """
        if value is None or not value.strip():
            return cls.OFFERED
        wanted = value.strip().lower()
        for status in cls:
            if status.value.lower() == wanted:
                return status
        raise ValueError(f"Unsupported installed software status: {value}")


_INSTALLED_SOFTWARE_LABELS = {
    InstalledSoftwareStatus.OFFERED: "Angeboten",
    InstalledSoftwareStatus.INSTALLED: "Installiert",
    InstalledSoftwareStatus.REJECTED: "Abgelehnt",
    InstalledSoftwareStatus.OUTDATED: "Veraltet",
}


class ProjectLifecycleStatus(str, Enum):
    """Commercial lifecycle of a project."""

    OFFERED = "OFFERED"
    ACTIVE = "ACTIVE"
    MAINTENANCE = "MAINTENANCE"
    EOL = "EOL"

    @property
    def label(self) -> str:
        if self is ProjectLifecycleStatus.EOL:
            return "EOL"
        return self.value.capitalize()


class InventoryRecord(BaseModel):
    """Base for inventory rows.

    Subclasses name their entity type and the field holding the row id.
    """

    model_config = ConfigDict(extra="ignore")

    entity_type: ClassVar[EntityType]
    id_field: ClassVar[str]

    @property
    def record_id(self) -> str:
        value = getattr(self, self.id_field)
        return "" if value is None else str(value)


class Account(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.ACCOUNT
    id_field: ClassVar[str] = "account_id"

    account_id: str
    account_name: str | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    vat_number: str | None = None
    country: str | None = None


class Address(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.ADDRESS
    id_field: ClassVar[str] = "address_id"

    address_id: str
    street: str | None = None
    city_id: str | None = None


class AudioDevice(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.AUDIO_DEVICE
    id_field: ClassVar[str] = "audio_device_id"

    audio_device_id: str
    client_id: str | None = None
    audio_device_brand: str | None = None
    device_serial_nr: str | None = None
    audio_device_firmware: str | None = None
    device_type: str | None = Field(default=None, description="HEADSET / SPEAKER / MIC")
    direction: str | None = None


class City(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.CITY
    id_field: ClassVar[str] = "city_id"

    city_id: str
    city_name: str | None = None
    country_code: str | None = None


class Client(InventoryRecord):
    """Operator working position."""

    entity_type: ClassVar[EntityType] = EntityType.CLIENT
    id_field: ClassVar[str] = "client_id"

    client_id: str
    site_id: str | None = None
    client_name: str | None = None
    client_brand: str | None = None
    client_serial_nr: str | None = None
    client_os: str | None = None
    patch_level: str | None = None
    install_type: str | None = Field(default=None, description="LOCAL / BROWSER")
    working_position_type: str | None = None
    other_installed_software: str | None = None


class Country(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.COUNTRY
    id_field: ClassVar[str] = "country_code"

    country_code: str = Field(description="ISO-3166-1 alpha-2")
    country_name: str | None = None


class DeploymentVariant(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.DEPLOYMENT_VARIANT
    id_field: ClassVar[str] = "variant_id"

    variant_id: str
    variant_code: str | None = None
    variant_name: str | None = None
    description: str | None = None
    active: bool = False


class InstalledSoftware(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.INSTALLED_SOFTWARE
    id_field: ClassVar[str] = "installed_software_id"

    installed_software_id: str
    site_id: str | None = None
    software_id: str | None = None
    status: str | None = None
    offered_date: str | None = None
    installed_date: str | None = None
    rejected_date: str | None = None
    outdated_date: str | None = None


class PhoneIntegration(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.PHONE_INTEGRATION
    id_field: ClassVar[str] = "phone_integration_id"

    phone_integration_id: str
    site_id: str | None = None
    phone_type: str | None = Field(default=None, description="Emergency / NonEmergency / Both")
    phone_brand: str | None = None
    interface_name: str | None = None
    capacity: int | None = None
    phone_firmware: str | None = None


class Project(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.PROJECT
    id_field: ClassVar[str] = "project_id"

    project_id: str
    project_sap_id: str | None = None
    project_name: str | None = None
    deployment_variant_id: str | None = None
    bundle_type: str | None = None
    create_date_time: str | None = None
    lifecycle_status: ProjectLifecycleStatus | None = None
    account_id: str | None = None
    address_id: str | None = None
    special_notes: str | None = None

    @field_validator("lifecycle_status", mode="before")
    @classmethod
    def _normalize_lifecycle(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip()
            return stripped.upper() if stripped else None
        return value


class Radio(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.RADIO
    id_field: ClassVar[str] = "radio_id"

    radio_id: str
    site_id: str | None = None
    assigned_client_id: str | None = None
    radio_brand: str | None = None
    radio_serial_nr: str | None = None
    mode: str | None = Field(default=None, description="Analog / Digital")
    digital_standard: str | None = None


class Server(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.SERVER
    id_field: ClassVar[str] = "server_id"

    server_id: str
    site_id: str | None = None
    server_name: str | None = None
    server_brand: str | None = None
    server_serial_nr: str | None = None
    server_os: str | None = None
    patch_level: str | None = None
    virtual_platform: str | None = Field(default=None, description="BareMetal / HyperV / vSphere")
    virtual_version: str | None = None
    high_availability: bool = False


class ServiceContract(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.SERVICE_CONTRACT
    id_field: ClassVar[str] = "contract_id"

    contract_id: str
    account_id: str | None = None
    project_id: str | None = None
    site_id: str | None = None
    contract_number: str | None = None
    status: str | None = Field(default=None, description="Planned / Approved / InProgress / Done / Canceled")
    start_date: date | None = None
    end_date: date | None = None


class Site(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.SITE
    id_field: ClassVar[str] = "site_id"

    site_id: str
    site_name: str | None = None
    project_ids: list[str] = Field(default_factory=list)
    address_id: str | None = None
    fire_zone: str | None = None
    tenant_count: int | None = None
    redundant_servers: int | None = None
    high_availability: bool = False


class Software(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.SOFTWARE
    id_field: ClassVar[str] = "software_id"

    software_id: str
    name: str | None = None
    release: str | None = None
    revision: str | None = None
    support_phase: str | None = Field(default=None, description="Preview / Production / EoL")
    license_model: str | None = None
    third_party: bool = False
    end_of_sales_date: str | None = None
    support_start_date: str | None = None
    support_end_date: str | None = None


class UpgradePlan(InventoryRecord):
    entity_type: ClassVar[EntityType] = EntityType.UPGRADE_PLAN
    id_field: ClassVar[str] = "upgrade_plan_id"

    upgrade_plan_id: str
    site_id: str | None = None
    software_id: str | None = None
    planned_window_start: date | None = None
    planned_window_end: date | None = None
    status: str | None = None
    created_at: date | None = None
    created_by: str | None = None


RECORD_MODELS: dict[EntityType, type[InventoryRecord]] = {
    model.entity_type: model
    for model in (
        Account,
        Address,
        AudioDevice,
        City,
        Client,
        Country,
        DeploymentVariant,
        InstalledSoftware,
        PhoneIntegration,
        Project,
        Radio,
        Server,
        ServiceContract,
        Site,
        Software,
        UpgradePlan,
    )
}
