"""Pytest configuration and fixtures."""

import sys
from collections.abc import Callable, Iterator
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from fastapi.testclient import TestClient

from inventory_search.app import create_app
from inventory_search.config import Settings
from inventory_search.inventory import (
    Account,
    City,
    Country,
    EntityType,
    InMemoryRepository,
    InventoryRecord,
    Project,
    Repository,
    ServiceContract,
    Site,
)
from inventory_search.search import IndexProgress, SearchIndex


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Create test settings with the index under tmp_path."""
    return Settings(
        host="127.0.0.1",
        port=8000,
        debug=True,
        index_path=tmp_path / "index",
        data_dir=tmp_path / "inventory",
        reindex_on_startup=False,
        reindex_interval_seconds=0,
        shutdown_timeout=5.0,
    )


@pytest.fixture
def repositories() -> dict[EntityType, Repository[InventoryRecord]]:
    """Small inventory covering several entity types."""
    return {
        EntityType.ACCOUNT: InMemoryRepository(
            [
                Account(
                    account_id="a1",
                    account_name="Alpha Dispatch",
                    country="Austria",
                    contact_email="ops@alpha.example",
                ),
            ]
        ),
        EntityType.CITY: InMemoryRepository(
            [
                City(city_id="VIE", city_name="Vienna", country_code="AT"),
                City(city_id="GRZ", city_name="Graz", country_code="AT"),
            ]
        ),
        EntityType.COUNTRY: InMemoryRepository(
            [Country(country_code="AT", country_name="Austria")]
        ),
        EntityType.PROJECT: InMemoryRepository(
            [
                Project(
                    project_id="p1",
                    project_name="Leoben Upgrade",
                    project_sap_id="SAP-4711",
                    lifecycle_status="maintenance",
                    account_id="a1",
                ),
            ]
        ),
        EntityType.SERVICE_CONTRACT: InMemoryRepository(
            [
                ServiceContract(
                    contract_id="c1",
                    contract_number="SC-2024-001",
                    status="Approved",
                    start_date=date(2024, 1, 1),
                    account_id="a1",
                    project_id="p1",
                ),
            ]
        ),
        EntityType.SITE: InMemoryRepository(
            [
                Site(
                    site_id="s1",
                    site_name="Leoben Control Room",
                    fire_zone="A",
                    tenant_count=3,
                    redundant_servers=2,
                    high_availability=True,
                    project_ids=["p1"],
                ),
            ]
        ),
    }


@pytest.fixture
def progress() -> IndexProgress:
    """Fresh progress tracker."""
    return IndexProgress()


@pytest.fixture
def search_index(tmp_path: Path, progress: IndexProgress) -> Iterator[SearchIndex]:
    """Initialized search index in a temporary directory."""
    index = SearchIndex(tmp_path / "index", progress=progress)
    index.initialize()
    yield index
    index.close()


@pytest.fixture
def client(
    settings: Settings,
    repositories: dict[EntityType, Repository[InventoryRecord]],
) -> Iterator[TestClient]:
    """Create test client with the lifespan running."""
    app = create_app(settings, repositories=repositories)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def drain(client: TestClient) -> Callable[[], None]:
    """Return a function that waits until every queued index event is handled."""

    def wait() -> None:
        client.portal.call(client.app.state.pipeline.join)

    return wait
