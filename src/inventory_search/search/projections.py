"""Per-entity projections from inventory rows to searchable field lists.

Every projector returns the row's fields in display order: the first
non-blank field becomes the hit's display text. Synthetic tokens such as
``statusactive`` or ``zonea`` let operators filter on exact values from the
search box.
"""

from collections.abc import Callable
from datetime import date
from typing import NamedTuple

import structlog

from inventory_search.inventory.domain import (
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
    Radio,
    Server,
    ServiceContract,
    Site,
    Software,
    UpgradePlan,
)
from inventory_search.search.documents import token_with_prefix

logger = structlog.get_logger()

FIRST_PARTY_VENDOR = "First-party"
THIRD_PARTY_VENDOR = "Third-party"


class Projection(NamedTuple):
    """Document type, id and ordered field values of one row."""

    doc_type: EntityType
    doc_id: str
    fields: tuple[str | None, ...]


def text(value: object) -> str | None:
    """Render a field value the way it is indexed."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _account(row: Account) -> tuple[str | None, ...]:
    return (row.account_name, row.country, row.contact_email)


def _address(row: Address) -> tuple[str | None, ...]:
    return (row.street, row.city_id)


def _audio_device(row: AudioDevice) -> tuple[str | None, ...]:
    return (
        row.audio_device_brand,
        row.device_serial_nr,
        row.audio_device_firmware,
        row.device_type,
        row.direction,
        row.client_id,
    )


def _city(row: City) -> tuple[str | None, ...]:
    return (row.city_name, row.country_code)


def _client(row: Client) -> tuple[str | None, ...]:
    return (
        row.client_name,
        row.client_brand,
        row.client_os,
        row.install_type,
        row.working_position_type,
        row.other_installed_software,
        row.site_id,
    )


def _country(row: Country) -> tuple[str | None, ...]:
    return (row.country_name,)


def _deployment_variant(row: DeploymentVariant) -> tuple[str | None, ...]:
    return (row.variant_name, row.variant_code, row.description, text(row.active))


def _installed_software(row: InstalledSoftware) -> tuple[str | None, ...]:
    try:
        status = InstalledSoftwareStatus.parse(row.status)
    except ValueError:
        logger.warning(
            "installed_software_status_unknown",
            status=row.status,
            record_id=row.installed_software_id,
        )
        status = InstalledSoftwareStatus.OFFERED

    dates = (row.offered_date, row.installed_date, row.rejected_date, row.outdated_date)
    date_tokens = tuple(
        token_with_prefix(prefix, value)
        for prefix, value in zip(("offered", "installed", "rejected", "outdated"), dates)
    )
    return (
        status.value,
        status.label,
        token_with_prefix("status", status.value),
        *dates,
        *date_tokens,
        row.site_id,
        row.software_id,
    )


def _phone_integration(row: PhoneIntegration) -> tuple[str | None, ...]:
    return (
        row.phone_type,
        row.phone_brand,
        row.interface_name,
        text(row.capacity),
        row.phone_firmware,
        row.site_id,
    )


def _project(row: Project) -> tuple[str | None, ...]:
    status = row.lifecycle_status
    return (
        row.project_name,
        row.bundle_type,
        status.value if status else None,
        status.label if status else None,
        token_with_prefix("status", status.value if status else None),
        row.project_sap_id,
        row.deployment_variant_id,
        row.account_id,
        row.address_id,
        row.special_notes,
    )


def _radio(row: Radio) -> tuple[str | None, ...]:
    return (
        row.radio_brand,
        row.radio_serial_nr,
        row.mode,
        row.digital_standard,
        row.site_id,
        row.assigned_client_id,
    )


def _server(row: Server) -> tuple[str | None, ...]:
    return (
        row.server_name,
        row.server_brand,
        row.server_serial_nr,
        row.server_os,
        row.patch_level,
        row.virtual_platform,
        row.virtual_version,
        row.site_id,
    )


def _service_contract(row: ServiceContract) -> tuple[str | None, ...]:
    return (
        row.contract_number,
        row.status,
        token_with_prefix("status", row.status),
        text(row.start_date),
        text(row.end_date),
        row.account_id,
        row.project_id,
        row.site_id,
    )


def _site(row: Site) -> tuple[str | None, ...]:
    redundant = text(row.redundant_servers) or ""
    ha = text(row.high_availability)
    return (
        row.site_name,
        row.fire_zone,
        token_with_prefix("zone", row.fire_zone),
        text(row.tenant_count),
        redundant,
        token_with_prefix("redundancy", redundant),
        ha,
        token_with_prefix("ha", ha),
        row.address_id,
        *row.project_ids,
    )


def _software(row: Software) -> tuple[str | None, ...]:
    return (
        row.name,
        row.release,
        row.revision,
        row.support_phase,
        row.license_model,
        THIRD_PARTY_VENDOR if row.third_party else FIRST_PARTY_VENDOR,
        token_with_prefix("thirdparty", text(row.third_party)),
        row.end_of_sales_date,
        row.support_start_date,
        row.support_end_date,
    )


def _upgrade_plan(row: UpgradePlan) -> tuple[str | None, ...]:
    return (
        row.status,
        text(row.planned_window_start),
        text(row.planned_window_end),
        text(row.created_at),
        row.created_by,
        row.site_id,
        row.software_id,
    )


_PROJECTORS: dict[EntityType, Callable[..., tuple[str | None, ...]]] = {
    EntityType.ACCOUNT: _account,
    EntityType.ADDRESS: _address,
    EntityType.AUDIO_DEVICE: _audio_device,
    EntityType.CITY: _city,
    EntityType.CLIENT: _client,
    EntityType.COUNTRY: _country,
    EntityType.DEPLOYMENT_VARIANT: _deployment_variant,
    EntityType.INSTALLED_SOFTWARE: _installed_software,
    EntityType.PHONE_INTEGRATION: _phone_integration,
    EntityType.PROJECT: _project,
    EntityType.RADIO: _radio,
    EntityType.SERVER: _server,
    EntityType.SERVICE_CONTRACT: _service_contract,
    EntityType.SITE: _site,
    EntityType.SOFTWARE: _software,
    EntityType.UPGRADE_PLAN: _upgrade_plan,
}


def project(record: InventoryRecord) -> Projection:
    """Project an inventory row onto its document fields.

    Args:
        record: Any inventory row model.

    Returns:
        Document type, id and ordered field values.

    Raises:
        TypeError: If the row's entity type has no projector.
    """
    projector = _PROJECTORS.get(record.entity_type)
    if projector is None:
        raise TypeError(f"No search projection for {type(record).__name__}")
    return Projection(record.entity_type, record.record_id, projector(record))
