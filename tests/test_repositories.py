"""JSON repository tests."""

import json
from pathlib import Path

import pytest

from inventory_search.inventory import (
    City,
    EntityType,
    JsonFileRepository,
    RepositoryError,
    load_repositories,
)


def test_missing_file_has_no_rows(tmp_path: Path) -> None:
    repository = JsonFileRepository(tmp_path / "city.json", City)
    assert repository.find_all() == []


def test_invalid_rows_are_skipped(tmp_path: Path) -> None:
    path = tmp_path / "city.json"
    path.write_text(
        json.dumps(
            [
                {"city_id": "VIE", "city_name": "Vienna", "country_code": "AT"},
                {"city_name": "No id"},
                {"city_id": "GRZ", "city_name": "Graz"},
            ]
        )
    )

    rows = JsonFileRepository(path, City).find_all()

    assert [row.city_id for row in rows] == ["VIE", "GRZ"]


def test_file_is_reread(tmp_path: Path) -> None:
    path = tmp_path / "city.json"
    repository = JsonFileRepository(path, City)
    path.write_text(json.dumps([{"city_id": "VIE"}]))
    assert len(repository.find_all()) == 1

    path.write_text(json.dumps([{"city_id": "VIE"}, {"city_id": "GRZ"}]))
    assert len(repository.find_all()) == 2


def test_malformed_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "city.json"
    path.write_text("[{")

    with pytest.raises(RepositoryError) as exc_info:
        JsonFileRepository(path, City).find_all()
    assert exc_info.value.source == str(path)


def test_non_array_raises(tmp_path: Path) -> None:
    path = tmp_path / "city.json"
    path.write_text(json.dumps({"city_id": "VIE"}))

    with pytest.raises(RepositoryError):
        JsonFileRepository(path, City).find_all()


def test_load_repositories_covers_every_entity(tmp_path: Path) -> None:
    repositories = load_repositories(tmp_path)

    assert set(repositories) == set(EntityType)
    city = repositories[EntityType.CITY]
    assert isinstance(city, JsonFileRepository)
    assert city.path == tmp_path / "city.json"
    assert repositories[EntityType.SERVICE_CONTRACT].path == tmp_path / "serviceContract.json"
