"""
Unit tests for data models.
"""

import pytest

from imagefinder.models import (
    ImageRecord,
    Match,
    IndexProgress,
    IndexResult,
    format_size,
    hash_to_hex,
    hex_to_hash,
)


class TestHashEncoding:
    """Test hex encoding of 64-bit hashes."""

    def test_zero_is_absent(self):
        assert hash_to_hex(0) is None
        assert hex_to_hash(None) == 0
        assert hex_to_hash('') == 0

    def test_fixed_width(self):
        assert hash_to_hex(1) == '0000000000000001'
        assert hash_to_hex((1 << 64) - 1) == 'ffffffffffffffff'

    def test_parse(self):
        assert hex_to_hash('8000000000000000') == 1 << 63


class TestImageRecord:
    """Test ImageRecord dataclass."""

    def test_defaults(self):
        record = ImageRecord(path='/data/a.jpg')
        assert record.dhash == 0
        assert not record.has_hash
        assert len(record.id) == 32

    def test_ids_are_unique(self):
        assert ImageRecord(path='/a.jpg').id != ImageRecord(path='/a.jpg').id

    def test_equality_by_path(self):
        a = ImageRecord(path='/data/a.jpg', dhash=1)
        b = ImageRecord(path='/data/a.jpg', dhash=2)
        assert a == b
        assert len({a, b}) == 1

    def test_properties(self):
        record = ImageRecord(path='/data/photos/a.jpg', dhash=5, width=1920, height=1080, file_size=2048)
        assert record.has_hash
        assert record.pixel_area == 1920 * 1080
        assert record.filename == 'a.jpg'
        assert record.directory == '/data/photos'
        assert record.resolution == '1920x1080'
        assert record.file_size_formatted == '2.0 KB'

    def test_dict_round_trip(self):
        record = ImageRecord(path='/data/a.jpg', dhash=(1 << 64) - 1, width=3, height=4, file_size=5)
        restored = ImageRecord.from_dict(record.to_dict())
        assert restored.dhash == record.dhash
        assert restored.id == record.id
        assert (restored.width, restored.height, restored.file_size) == (3, 4, 5)


class TestMatch:
    """Test Match dataclass."""

    def test_from_record(self):
        record = ImageRecord(path='/data/a.jpg', dhash=5, width=30, height=20, file_size=99)
        match = Match.from_record(record, 3)
        assert match.distance == 3.0
        assert isinstance(match.distance, float)
        assert match.pixel_area == 600

    def test_to_dict(self):
        data = Match(path='/data/a.jpg', width=30, height=20, file_size=1024, distance=2.0).to_dict()
        assert data['filename'] == 'a.jpg'
        assert data['resolution'] == '30x20'
        assert data['file_size_formatted'] == '1.0 KB'
        assert data['distance'] == 2.0


class TestIndexProgress:
    """Test IndexProgress snapshots."""

    def test_fraction(self):
        assert IndexProgress(processed=25, total=100).fraction == 0.25
        assert IndexProgress(processed=25, total=100).percent == 25

    def test_empty_run_is_complete(self):
        assert IndexProgress(processed=0, total=0).fraction == 1.0

    def test_frozen(self):
        progress = IndexProgress(processed=1, total=2)
        with pytest.raises(AttributeError):
            progress.processed = 2

    def test_to_dict(self):
        data = IndexProgress(processed=1, total=4, current_file='a.jpg', eta_seconds=3.0).to_dict()
        assert data == {
            'processed': 1,
            'total': 4,
            'current_file': 'a.jpg',
            'eta_seconds': 3.0,
            'percent': 25,
        }


class TestIndexResult:
    """Test IndexResult."""

    def test_as_tuple(self):
        assert IndexResult(indexed=3, total=4).as_tuple() == (3, 4)

    def test_to_dict(self):
        data = IndexResult(indexed=3, total=4, failed=1, elapsed_seconds=1.23456, root='/data').to_dict()
        assert data['elapsed_seconds'] == 1.23
        assert data['failed'] == 1
        assert data['cancelled'] is False


class TestFormatSize:
    """Test format_size helper."""

    @pytest.mark.parametrize('size, expected', [
        (0, '0.0 B'),
        (512, '512.0 B'),
        (1024, '1.0 KB'),
        (1024 * 1024 * 3, '3.0 MB'),
        (1024 ** 4, '1.0 TB'),
    ])
    def test_units(self, size, expected):
        assert format_size(size) == expected
