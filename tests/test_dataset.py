"""Tests for building and writing the map dataset."""

import importlib.util
import json
import logging
from pathlib import Path

import pytest

import middleclassmap.dataset as dataset
from middleclassmap.dataset import GROUP_SOURCES, build_dataset, load_locations, point_weight, run, write_dataset
from middleclassmap.geodesy.errors import InvalidGridReferenceError
from middleclassmap.schemas import FeatureCollection

NORWICH_FARM = {"name": "  Norfolk Farm Shop ", "url": "https://example.com/farm", "latitude": 52.65798, "longitude": 1.71605}
LONDON_STORE = {"name": "Oxford Street", "url": "https://example.com/ox", "latitude": 51.5152, "longitude": -0.1445}
WARSAW_STORE = {"name": "Warsaw", "url": "https://example.com/wa", "latitude": 52.23, "longitude": 21.01}

SCRIPT_PATH = Path(__file__).resolve().parent.parent / "scripts" / "create_dataset.py"


# ── Weights ──────────────────────────────────────────────────────


class TestPointWeight:
    @pytest.mark.parametrize("population, weight", [
        (0, 1.25),
        (499, 1.25),
        (500, 1.0),
        (1999, 1.0),
        (2000, 0.75),
        (7499, 0.75),
        (7500, 0.5),
        (19999, 0.5),
        (20000, 0.25),
        (49999, 0.25),
        (50000, 0.1),
        (1_000_000, 0.1),
    ])
    def test_bands(self, population, weight):
        assert point_weight(population) == weight


# ── Building ─────────────────────────────────────────────────────


class TestBuildDataset:
    def test_keeps_points_inside_outline(self, empty_grid, gb_ring):
        collection = build_dataset({"FARM_SHOP": [NORWICH_FARM, WARSAW_STORE]}, empty_grid, gb_ring)
        assert len(collection.features) == 1

        feature = collection.features[0]
        assert feature.properties.group == "FARM_SHOP"
        assert feature.properties.name == "Norfolk Farm Shop"
        assert feature.properties.url == "https://example.com/farm"
        assert feature.properties.weight == 1.25
        assert feature.geometry.coordinates == [1.71605, 52.65798]

    def test_group_order(self, empty_grid, gb_ring):
        locations = {"JOHN_LEWIS": [LONDON_STORE], "FARM_SHOP": [NORWICH_FARM]}
        collection = build_dataset(locations, empty_grid, gb_ring)
        assert [f.properties.group for f in collection.features] == ["JOHN_LEWIS", "FARM_SHOP"]

    def test_skips_missing_coordinates(self, empty_grid, gb_ring):
        items = [{"name": "Nowhere", "url": "https://example.com", "latitude": None, "longitude": 1.0}]
        collection = build_dataset({"FARM_SHOP": items}, empty_grid, gb_ring)
        assert collection.features == []

    def test_skips_numeric_strings(self, empty_grid, gb_ring):
        items = [{"name": "Stringly", "url": "https://example.com", "latitude": "52.65798", "longitude": "1.71605"}]
        collection = build_dataset({"FARM_SHOP": items}, empty_grid, gb_ring)
        assert collection.features == []

    def test_integer_coordinates_accepted(self, empty_grid, gb_ring):
        items = [{"name": "Whole degrees", "url": "https://example.com", "latitude": 52, "longitude": 1}]
        collection = build_dataset({"FARM_SHOP": items}, empty_grid, gb_ring)
        assert collection.features[0].geometry.coordinates == [1.0, 52.0]

    def test_skips_malformed_records(self, empty_grid, gb_ring, caplog):
        items = [{"url": "https://example.com"}, NORWICH_FARM]
        with caplog.at_level(logging.WARNING):
            collection = build_dataset({"FARM_SHOP": items}, empty_grid, gb_ring)
        assert len(collection.features) == 1
        assert "malformed" in caplog.text

    def test_skips_grid_errors(self, empty_grid, gb_ring, monkeypatch, caplog):
        def reject(lon, lat, grid):
            raise InvalidGridReferenceError("invalid easting '-1'")

        monkeypatch.setattr(dataset, "population_at", reject)
        with caplog.at_level(logging.WARNING):
            collection = build_dataset({"FARM_SHOP": [NORWICH_FARM]}, empty_grid, gb_ring)
        assert collection.features == []
        assert "Norfolk Farm Shop" in caplog.text

    def test_weight_from_population(self, empty_grid, gb_ring, monkeypatch):
        monkeypatch.setattr(dataset, "population_at", lambda lon, lat, grid: 60000)
        collection = build_dataset({"JOHN_LEWIS": [LONDON_STORE]}, empty_grid, gb_ring)
        assert collection.features[0].properties.weight == 0.1


# ── Loading and writing ──────────────────────────────────────────


class TestLoadLocations:
    def test_missing_files_skipped(self, tmp_path, caplog):
        (tmp_path / "farmShops.json").write_text(json.dumps([NORWICH_FARM]))
        with caplog.at_level(logging.WARNING):
            locations = load_locations(tmp_path)
        assert list(locations) == ["FARM_SHOP"]
        assert locations["FARM_SHOP"][0]["name"] == NORWICH_FARM["name"]
        assert "JOHN_LEWIS" in caplog.text

    def test_follows_group_order(self, tmp_path):
        for filename in reversed(list(GROUP_SOURCES.values())):
            (tmp_path / filename).write_text("[]")
        assert list(load_locations(tmp_path)) == list(GROUP_SOURCES)

    def test_not_a_list(self, tmp_path):
        (tmp_path / "spaceNK.json").write_text(json.dumps({"name": "x"}))
        with pytest.raises(ValueError):
            load_locations(tmp_path)


class TestWriteDataset:
    def test_compact_geojson(self, tmp_path, empty_grid, gb_ring):
        collection = build_dataset({"FARM_SHOP": [NORWICH_FARM]}, empty_grid, gb_ring)
        path = write_dataset(collection, tmp_path / "nested" / "dataset.json")

        text = path.read_text()
        assert ", " not in text and ": " not in text
        data = json.loads(text)
        assert data["type"] == "FeatureCollection"
        assert data["features"][0] == {
            "type": "Feature",
            "properties": {
                "group": "FARM_SHOP",
                "name": "Norfolk Farm Shop",
                "url": "https://example.com/farm",
                "weight": 1.25,
            },
            "geometry": {"type": "Point", "coordinates": [1.71605, 52.65798]},
        }

    def test_empty_collection(self, tmp_path):
        path = write_dataset(FeatureCollection(), tmp_path / "dataset.json")
        assert json.loads(path.read_text()) == {"type": "FeatureCollection", "features": []}


# ── End to end ───────────────────────────────────────────────────


def _write_inputs(tmp_path):
    locations_dir = tmp_path / "locations"
    locations_dir.mkdir()
    (locations_dir / "farmShops.json").write_text(json.dumps([NORWICH_FARM, WARSAW_STORE]))
    (locations_dir / "johnLewis.json").write_text(json.dumps([LONDON_STORE]))
    return locations_dir


class TestRun:
    def test_builds_and_writes(self, tmp_path, asc_file, outline_file):
        locations_dir = _write_inputs(tmp_path)
        output = tmp_path / "website" / "dataset.json"

        collection = run(
            locations_dir=locations_dir,
            population_path=asc_file,
            outline_path=outline_file,
            output_path=output,
            cache_path=None,
        )

        assert [f.properties.group for f in collection.features] == ["FARM_SHOP", "JOHN_LEWIS"]
        assert len(json.loads(output.read_text())["features"]) == 2


class TestCreateDatasetScript:
    @pytest.fixture()
    def script(self):
        spec = importlib.util.spec_from_file_location("create_dataset", SCRIPT_PATH)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    def test_success(self, script, tmp_path, asc_file, outline_file):
        locations_dir = _write_inputs(tmp_path)
        output = tmp_path / "out.json"
        code = script.main([
            "--locations-dir", str(locations_dir),
            "--population", str(asc_file),
            "--outline", str(outline_file),
            "--output", str(output),
            "--no-cache",
        ])
        assert code == 0
        assert output.exists()

    def test_failure_exit_code(self, script, tmp_path, outline_file):
        code = script.main([
            "--locations-dir", str(tmp_path),
            "--population", str(tmp_path / "missing.asc"),
            "--outline", str(outline_file),
            "--output", str(tmp_path / "out.json"),
            "--no-cache",
        ])
        assert code == 1
        assert not (tmp_path / "out.json").exists()
