"""
Unit tests for formatters, validators, user configuration and the console
progress observer.
"""

import json
import logging

import pytest

from imagefinder.models import IndexProgress
from imagefinder.scanner import ConsoleProgress
from imagefinder.user_config import get_user_config
from imagefinder.utils import formatters, validators


class TestFormatters:
    """Test human-readable formatting helpers."""

    def test_format_number(self):
        assert formatters.format_number(1234567) == '1,234,567'

    @pytest.mark.parametrize('seconds, expected', [
        (45, '45s'),
        (150, '2m 30s'),
        (3665, '1h 1m'),
    ])
    def test_format_time_estimate(self, seconds, expected):
        assert formatters.format_time_estimate(seconds) == expected

    @pytest.mark.parametrize('seconds, expected', [
        (None, 'ETA —'),
        (0, 'ETA 0m 00s'),
        (65, 'ETA 1m 05s'),
        (3725, 'ETA 1h 02m 05s'),
        (-3, 'ETA 0m 00s'),
    ])
    def test_format_eta(self, seconds, expected):
        assert formatters.format_eta(seconds) == expected

    def test_format_distance(self):
        assert formatters.format_distance(0) == '100.0%'
        assert formatters.format_distance(16) == '75.0%'
        assert formatters.format_distance(64) == '0.0%'


class TestValidators:
    """Test input validators."""

    def test_file_accessible(self, temp_dir):
        path = temp_dir / 'a.txt'
        path.write_text('x')
        assert validators.validate_file_accessible(str(path)) == (True, '')
        assert validators.validate_file_accessible(str(temp_dir / 'missing')) == (False, 'File does not exist')
        assert validators.validate_file_accessible(str(temp_dir))[0] is False

    def test_directory(self, temp_dir):
        assert validators.validate_directory(str(temp_dir)) == (True, '')
        assert validators.validate_directory('')[0] is False
        assert validators.validate_directory('relative/path')[0] is False

    @pytest.mark.parametrize('workers, ok', [(1, True), (32, True), ('4', True), (0, False), (33, False), ('x', False)])
    def test_workers(self, workers, ok):
        assert validators.validate_workers(workers)[0] is ok

    def test_index_params(self, temp_dir):
        assert validators.validate_index_params(str(temp_dir)) == (True, '')
        assert validators.validate_index_params(str(temp_dir), workers=99)[0] is False


class TestUserConfig:
    """Test layered user configuration."""

    def test_defaults(self):
        config = get_user_config()
        assert config.default_workers == 4
        assert config.batch_size == 50
        assert config.result_limit == 10
        assert config.forced_match_distance == 2.0

    def test_singleton(self):
        assert get_user_config() is get_user_config()

    def test_config_file(self, isolated_user_config):
        (isolated_user_config / 'config.json').write_text(json.dumps({'batch_size': 20, 'result_limit': 5}))
        config = get_user_config()
        config.reload()
        assert config.batch_size == 20
        assert config.result_limit == 5

    def test_env_overrides_file(self, isolated_user_config, monkeypatch):
        (isolated_user_config / 'config.json').write_text(json.dumps({'default_workers': 2}))
        monkeypatch.setenv('IMAGEFINDER_WORKERS', '8')
        config = get_user_config()
        config.reload()
        assert config.default_workers == 8

    def test_db_override(self, monkeypatch, temp_dir):
        monkeypatch.setenv('IMAGEFINDER_DB', str(temp_dir / 'custom.db'))
        assert get_user_config().index_db_file == str(temp_dir / 'custom.db')

    def test_bad_config_file_ignored(self, isolated_user_config):
        (isolated_user_config / 'config.json').write_text('{not json')
        config = get_user_config()
        config.reload()
        assert config.batch_size == 50

    def test_create_example_config(self, isolated_user_config):
        config = get_user_config()
        assert config.create_example_config()
        data = json.loads((isolated_user_config / 'config.json').read_text())
        assert data['forced_match_distance'] == 2.0


class TestConsoleProgress:
    """Test the terminal progress observer."""

    def test_disabled_is_silent(self, capsys):
        observer = ConsoleProgress(enabled=False)
        observer(IndexProgress(processed=1, total=2))
        observer.close()
        captured = capsys.readouterr()
        assert captured.out == '' and captured.err == ''

    def test_logs_without_tqdm(self, monkeypatch, caplog):
        monkeypatch.setattr('imagefinder.scanner.progress.HAS_TQDM', False)
        observer = ConsoleProgress(logger=logging.getLogger('test.progress'))
        with caplog.at_level(logging.INFO, logger='test.progress'):
            observer(IndexProgress(processed=5, total=10, current_file='a.jpg', eta_seconds=30))
        assert 'Indexed 5/10 (50%' in caplog.text
        assert 'a.jpg' in caplog.text
