import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from landscape_calculator.data.feature_catalog import load_feature_catalog

HEADER = "key,group,name,price_per_unit,days_per_unit,description\n"


@pytest.fixture(scope="function")
def catalog():
    return load_feature_catalog()


def write_catalog(tmp_path, body, header=HEADER):
    path = tmp_path / "features.csv"
    path.write_text(header + body, encoding="utf-8")
    return path


def test_shipped_catalog_loads(catalog):
    assert len(catalog) == 13
    assert catalog.keys()[0] == "custom_caves"
    assert "floating_islands" in catalog

    caves = catalog.get("custom_caves")
    assert caves.price_per_unit == 150
    assert caves.days_per_unit == 2
    assert "cave systems" in caves.description


def test_catalog_groups(catalog):
    grouped = catalog.grouped()

    assert [s.key for s in grouped["structures"]] == ["villages", "strongholds", "nether_portals"]
    assert [s.key for s in grouped["custom"]] == ["custom_feature"]
    assert len(grouped[""]) == 9


def test_default_config(catalog):
    config = catalog.default_config()

    assert config.width == 1000
    assert config.length == 1000
    assert config.delivery_days is None
    assert len(config.features) == len(catalog)
    assert all(not f.enabled and f.quantity == 1 for f in config.features)
    assert config.get_feature("custom_feature").is_custom


def test_unknown_feature(catalog):
    with pytest.raises(KeyError):
        catalog.get("dragons")


def test_missing_catalog_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_feature_catalog(tmp_path / "nope.csv")


def test_missing_columns(tmp_path):
    path = write_catalog(tmp_path, "villages,Villages,40\n", header="key,name,price_per_unit\n")

    with pytest.raises(ValueError, match="missing columns"):
        load_feature_catalog(path)


def test_duplicate_keys(tmp_path):
    path = write_catalog(tmp_path, "villages,,Villages,40,2,\nvillages,,Villages 2,40,2,\n")

    with pytest.raises(ValueError, match="Duplicate"):
        load_feature_catalog(path)


def test_negative_or_bad_numbers(tmp_path):
    path = write_catalog(tmp_path, "villages,,Villages,-40,2,\ncaves,,Caves,10,abc,\n")

    with pytest.raises(ValueError) as exc:
        load_feature_catalog(path)
    assert "price_per_unit" in str(exc.value)
    assert "days_per_unit" in str(exc.value)


def test_single_custom_feature(tmp_path):
    path = write_catalog(tmp_path, "a,custom,A,0,0,\nb,custom,B,0,0,\n")

    with pytest.raises(ValueError, match="custom"):
        load_feature_catalog(path)


def test_unknown_group(tmp_path):
    path = write_catalog(tmp_path, "a,dungeons,A,0,0,\n")

    with pytest.raises(ValueError, match="groups"):
        load_feature_catalog(path)


def test_custom_catalog_file(tmp_path):
    path = write_catalog(tmp_path, "villages,structures,Villages,45.5,2,Small towns\n")
    catalog = load_feature_catalog(path)

    spec = catalog.get("villages")
    assert spec.price_per_unit == 45.5
    assert spec.group == "structures"
    assert spec.to_entry().enabled is False
