"""
Tests for the CNV header repository.
"""

from datetime import datetime

import pytest

from cnv_reader.models.values import Coordinate
from cnv_reader.services.repository import HeaderRepository
from cnv_reader.utils.sample_data import generate_cast, generate_test_data_set


@pytest.fixture
def data_folder(tmp_path):
    """Folder with three generated casts."""
    folder = tmp_path / "cnv"
    generate_test_data_set(folder)
    return folder


class TestHeaderRepository:
    """Tests for HeaderRepository."""

    def test_scan_counts_cnv_files(self, data_folder):
        """Only .cnv files are indexed, suffix case ignored."""
        (data_folder / "notes.txt").write_text("* not a cast\n*END*\n")
        generate_cast(data_folder / "ST04.CNV")

        repo = HeaderRepository(data_folder)

        assert repo.header_count == 4

    def test_missing_folder(self, tmp_path):
        repo = HeaderRepository()

        assert repo.scan_folder(tmp_path / "missing") == 0

    def test_file_as_folder(self, data_folder):
        """A file path indexes nothing."""
        repo = HeaderRepository(data_folder / "st01_coastal.cnv")

        assert repo.header_count == 0
        assert repo.list_headers() == []

    def test_list_newest_first(self, data_folder):
        repo = HeaderRepository(data_folder)

        summaries = repo.list_headers()

        assert [s.name for s in summaries] == ["st03_offshore", "st02_shelf", "st01_coastal"]
        assert summaries[-1].recorded_at == "2015-11-27 17:55:23"
        assert summaries[-1].metric_count == 4

    def test_list_near_sorts_by_distance(self, data_folder):
        """Headers closest to the given position come first."""
        repo = HeaderRepository(data_folder)

        summaries = repo.list_headers(near=Coordinate(lat=-33.1, lng=-72.5))

        assert summaries[0].name == "st03_offshore"
        assert summaries[0].distance_m == pytest.approx(0.0, abs=1.0)
        assert summaries[-1].name == "st01_coastal"

    def test_header_without_position_sorted_last(self, data_folder):
        (data_folder / "nopos.cnv").write_text("* Edwin\n*END*\n", encoding="utf-8")
        repo = HeaderRepository(data_folder)

        summaries = repo.list_headers(near=Coordinate(lat=-33.1, lng=-72.5))

        assert summaries[-1].name == "nopos"
        assert summaries[-1].distance_m is None

    def test_get_header_cached(self, data_folder):
        repo = HeaderRepository(data_folder)
        header_id = repo.list_headers()[0].id

        assert repo.get_header(header_id) is repo.get_header(header_id)

    def test_get_unknown_header(self, data_folder):
        repo = HeaderRepository(data_folder)

        assert repo.get_header("nonexistent") is None
        assert repo.get_error("nonexistent") is None

    def test_broken_file_reported(self, data_folder):
        """Unreadable headers are skipped in listings and keep their error."""
        broken = data_folder / "broken.cnv"
        broken.write_text("* Edwin\n  1.000  2.000\n", encoding="utf-8")
        repo = HeaderRepository(data_folder)
        header_id = next(i for i in repo._index if repo.get_filepath(i) == broken)

        assert len(repo.list_headers()) == 3
        assert repo.get_header(header_id) is None
        assert "line 2" in repo.get_error(header_id)

    def test_metric_catalog(self, data_folder):
        """Each descriptor is counted once per file."""
        repo = HeaderRepository(data_folder)

        catalog = repo.metric_catalog()

        assert list(catalog.columns) == ["name", "type", "unit", "file_count"]
        assert len(catalog) == 4
        assert set(catalog["file_count"]) == {3}

        pressure = catalog[catalog["name"] == "prDM"].iloc[0]
        assert pressure["type"] == "Pressure"
        assert pressure["unit"] == "db"

        flag = catalog[catalog["name"] == "flag"].iloc[0]
        assert flag["unit"] is None

    def test_metric_catalog_empty(self, tmp_path):
        repo = HeaderRepository(tmp_path)

        catalog = repo.metric_catalog()

        assert catalog.empty
        assert list(catalog.columns) == ["name", "type", "unit", "file_count"]

    def test_set_data_folder_resets(self, data_folder, tmp_path):
        repo = HeaderRepository(data_folder)
        other = tmp_path / "other"
        generate_cast(other / "single.cnv", recorded_at=datetime(2016, 1, 2, 3, 4, 5))

        count = repo.set_data_folder(other)

        assert count == 1
        assert [s.name for s in repo.list_headers()] == ["single"]
