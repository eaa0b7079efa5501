import math

import pytest

from gridparts.fasteners import catalog
from gridparts.fasteners.catalog import (
    get_thread_data,
    list_available_sizes,
    load_catalog,
    metric_size_for,
)
from gridparts.threadgen import IsoThread, metric_thread, minor_diameter, thread_height


@pytest.fixture(autouse=True)
def clean_catalog_cache(monkeypatch):
    monkeypatch.delenv(catalog.GRIDPARTS_THREAD_DATA, raising=False)
    catalog.clear_cache()
    yield
    catalog.clear_cache()


class TestBundledCatalog:

    def test_coarse_pitches(self):
        assert get_thread_data("M8")["pitch"] == 1.25
        assert get_thread_data("m3")["pitch"] == 0.5
        assert get_thread_data("M24")["pitch"] == 3.0

    def test_sizes_sorted_by_diameter(self):
        sizes = list_available_sizes()
        assert sizes[0] == "M2"
        assert sizes.index("M8") < sizes.index("M10")

    def test_unknown_size(self):
        with pytest.raises(KeyError):
            get_thread_data("M7")

    def test_unknown_series(self):
        with pytest.raises(ValueError):
            load_catalog("whitworth")

    def test_catalog_records_its_source(self):
        assert load_catalog()["_source_path"].endswith("metric_coarse.yaml")


def test_environment_directory_overrides_bundled(tmp_path, monkeypatch):
    (tmp_path / "metric_coarse.yaml").write_text(
        'schema_version: "1.0"\n'
        "sizes:\n"
        "  M8:\n"
        "    nominal_diameter: 8.0\n"
        "    pitch: 1.0\n"
    )
    monkeypatch.setenv(catalog.GRIDPARTS_THREAD_DATA, str(tmp_path))
    catalog.clear_cache()
    assert get_thread_data("M8")["pitch"] == 1.0


def test_custom_path_validation(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text('schema_version: "2.0"\nsizes:\n  M8:\n    pitch: 1.25\n')
    with pytest.raises(ValueError):
        load_catalog(custom_path=bad)
    zero = tmp_path / "zero.yaml"
    zero.write_text("sizes:\n  M8:\n    pitch: 0\n")
    with pytest.raises(ValueError):
        load_catalog(custom_path=zero)
    with pytest.raises(FileNotFoundError):
        load_catalog(custom_path=tmp_path / "missing.yaml")


def test_metric_size_rounds_down():
    assert metric_size_for(8) == "M8"
    assert metric_size_for(8.9) == "M8"
    with pytest.raises(ValueError):
        metric_size_for(0)


class TestIsoThread:

    def test_dimensions(self):
        thread = metric_thread(8, 1.25)
        h = math.sqrt(3) / 2 * 1.25
        assert math.isclose(thread.height, h)
        assert math.isclose(thread.depth, 5 / 8 * h)
        assert math.isclose(thread.minor_diameter, 8 - 2 * 5 / 8 * h)
        assert math.isclose(minor_diameter(8, 1.25), thread.minor_diameter)
        assert math.isclose(thread_height(2.0), math.sqrt(3))

    def test_section_is_the_tooth_trapezoid(self):
        thread = IsoThread(8.0, 1.6)
        section = thread.section()
        assert section.closed
        assert len(section.segments) == 4
        lo, hi = section.bounds()
        assert math.isclose(lo.x, 0.2) and math.isclose(hi.x, 1.4)
        assert math.isclose(lo.y, 0.0, abs_tol=1e-12)
        assert math.isclose(hi.y, thread.depth)
        # crest flat is an eighth of the pitch
        crest = section.segments[1]
        assert math.isclose(crest.length, 0.2)

    def test_rejects_impossible_threads(self):
        with pytest.raises(ValueError):
            IsoThread(8.0, 0.0)
        with pytest.raises(ValueError):
            IsoThread(1.0, 2.0)
