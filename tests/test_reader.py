"""Tests for file based reading."""
import bz2
import gzip
import logging

import pytest

from osmingest.osm.errors import StreamError
from osmingest.osm.reader import ReaderConfig
from osmingest.osm.reader import Stats
from osmingest.osm.reader import parse_file
from osmingest.osm.reader import read_elements


class TestParseFile:
    def test_plain_file(self, osm_file):
        parsed = parse_file(str(osm_file))

        assert [p.id for p in parsed.points] == [1, 2, 3]
        assert [w.id for w in parsed.ways] == [10]
        assert [r.id for r in parsed.relations] == [20]

    def test_gzip_file(self, tmp_path, sample_osm):
        path = tmp_path / "sample.osm.gz"
        path.write_bytes(gzip.compress(sample_osm))

        parsed = parse_file(str(path))

        assert len(parsed.points) == 3

    def test_bz2_file(self, tmp_path, sample_osm):
        path = tmp_path / "sample.osm.bz2"
        path.write_bytes(bz2.compress(sample_osm))

        parsed = parse_file(str(path))

        assert len(parsed.ways) == 1

    def test_truncated_gzip_file(self, tmp_path, sample_osm):
        path = tmp_path / "sample.osm.gz"
        path.write_bytes(gzip.compress(sample_osm)[:-20])

        with pytest.raises(StreamError) as excinfo:
            parse_file(str(path))

        assert isinstance(excinfo.value.__cause__, EOFError)

    def test_truncated_bz2_file(self, tmp_path, sample_osm):
        path = tmp_path / "sample.osm.bz2"
        path.write_bytes(bz2.compress(sample_osm)[:-20])

        with pytest.raises(StreamError):
            parse_file(str(path))

    def test_compression_disabled(self, tmp_path, sample_osm):
        path = tmp_path / "sample.osm.gz"
        path.write_bytes(gzip.compress(sample_osm))

        with pytest.raises(StreamError):
            parse_file(str(path), ReaderConfig(compression=None))

    def test_logs_summary(self, osm_file, caplog):
        with caplog.at_level(logging.INFO, logger="osmingest.osm"):
            parse_file(str(osm_file))

        assert "Stats(points=3, ways=1, relations=1)" in caplog.text


class TestReadElements:
    def test_progress_bar(self, osm_file):
        elements = list(read_elements(str(osm_file), ReaderConfig(progress=True)))

        assert len(elements) == 5

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            list(read_elements(str(tmp_path / "missing.osm")))


class TestStats:
    def test_update(self, osm_file):
        stats = Stats()
        for element in read_elements(str(osm_file)):
            stats.update(element)

        assert stats == Stats(points=3, ways=1, relations=1)
