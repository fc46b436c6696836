"""
Tests for the scrape.py entry point using mock objects.
"""
import json
import sys
import pytest
from unittest.mock import MagicMock

import scrape


@pytest.fixture
def cli(monkeypatch, tmp_path, sample_manifest_data):
    """Patch the logger setup and the scraper class; write a manifest file."""
    manifest_path = tmp_path / "response.json"
    manifest_path.write_text(json.dumps(sample_manifest_data), encoding="utf-8")

    mock_setup_logger = MagicMock()
    mock_add_run_log = MagicMock(return_value="logs/Ultimate Go_20261019_093000.log")
    mock_scraper_class = MagicMock()
    mock_scraper = mock_scraper_class.return_value
    mock_scraper.run.return_value.item_count = 3

    monkeypatch.setattr(scrape.logger, 'setup_logger', mock_setup_logger)
    monkeypatch.setattr(scrape.logger, 'add_run_log', mock_add_run_log)
    monkeypatch.setattr(scrape, 'LessonScraper', mock_scraper_class)
    monkeypatch.setattr(scrape.sys.stdin, 'isatty', lambda: False, raising=False)

    def run(*args):
        monkeypatch.setattr(sys, 'argv', ['scrape.py', '--manifest', str(manifest_path),
                                          '--config', str(tmp_path / "missing.json"), *args])
        return scrape.main()

    run.setup_logger = mock_setup_logger
    run.add_run_log = mock_add_run_log
    run.scraper_class = mock_scraper_class
    run.scraper = mock_scraper
    run.manifest_path = manifest_path
    run.tmp_path = tmp_path
    return run


def test_main_successful_execution(cli):
    result = cli('--cookie', 'secret')

    assert result == 0
    cli.setup_logger.assert_called_once()
    args, kwargs = cli.scraper_class.call_args
    config = args[0]
    assert config.session_cookie == 'secret'
    assert config.settle_delay == 5
    assert config.complete_lessons is True
    assert kwargs == {'headless': True, 'browser_type': 'chrome'}

    manifest = cli.scraper.run.call_args[0][0]
    assert manifest.course_slug == 'ultimate-go'
    cli.scraper.close.assert_called_once()


def test_main_options_passed_to_config(cli):
    result = cli('--cookie', 'secret', '--show-browser', '--browser', 'firefox',
                 '--settle-delay', '1.5', '--media-timeout', '20', '--lesson-delay', '2',
                 '--output-dir', 'out', '--include-text', '--text-dir', 'texts', '--no-complete')

    assert result == 0
    args, kwargs = cli.scraper_class.call_args
    config = args[0]
    assert kwargs == {'headless': False, 'browser_type': 'firefox'}
    assert config.settle_delay == 1.5
    assert config.media_timeout == 20
    assert config.lesson_delay == 2
    assert config.output_dir == 'out'
    assert config.include_text is True
    assert config.text_dir == 'texts'
    assert config.complete_lessons is False


def test_main_without_cookie(cli):
    result = cli()

    assert result == 1
    cli.scraper_class.assert_not_called()


def test_main_cookie_from_config(cli):
    config_path = cli.tmp_path / "config.json"
    config_path.write_text(json.dumps({"cookie": "from-file"}), encoding="utf-8")

    result = cli('--config', str(config_path))

    assert result == 0
    assert cli.scraper_class.call_args[0][0].session_cookie == 'from-file'


def test_main_unhandled_exception_closes_browser(cli):
    cli.scraper.run.side_effect = OSError("disk full")

    result = cli('--cookie', 'secret')

    assert result == 1
    cli.scraper.close.assert_called_once()


def test_main_keyboard_interrupt(cli):
    cli.scraper.run.side_effect = KeyboardInterrupt()

    result = cli('--cookie', 'secret')

    assert result == 130
    cli.scraper.close.assert_called_once()


def test_main_missing_manifest_propagates(cli):
    cli.manifest_path.unlink()

    with pytest.raises(FileNotFoundError):
        cli('--cookie', 'secret')
    cli.scraper_class.assert_not_called()


def test_main_fetch_manifest(cli, monkeypatch, sample_manifest_data):
    mock_fetch = MagicMock(return_value=sample_manifest_data)
    monkeypatch.setattr(scrape, 'fetch_manifest', mock_fetch)
    cli.manifest_path.unlink()

    result = cli('--cookie', 'secret', '--fetch-manifest', 'ultimate-go')

    assert result == 0
    mock_fetch.assert_called_once_with('ultimate-go', 'secret')
    assert json.loads(cli.manifest_path.read_text(encoding="utf-8")) == sample_manifest_data


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file(self, tmp_path):
        assert scrape.load_config(str(tmp_path / "none.json")) == {}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{broken", encoding="utf-8")
        assert scrape.load_config(str(path)) == {}

    def test_valid_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"cookie": "abc"}), encoding="utf-8")
        assert scrape.load_config(str(path)) == {"cookie": "abc"}

    def test_default_is_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / "config.json").write_text(json.dumps({"cookie": "cwd"}), encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert scrape.load_config() == {"cookie": "cwd"}


def test_main_run_log_named_after_course(cli):
    assert cli('--cookie', 'secret') == 0
    cli.add_run_log.assert_called_once_with('Ultimate Go')


def test_main_no_log_file(cli):
    assert cli('--cookie', 'secret', '--no-log-file') == 0
    cli.add_run_log.assert_not_called()


def test_main_console_level(cli):
    cli('--cookie', 'secret', '--log-level', 'debug')
    cli.setup_logger.assert_called_once_with(level=scrape.logger.DEBUG, console_level=scrape.logger.INFO)

    cli.setup_logger.reset_mock()
    cli('--cookie', 'secret', '--log-level', 'debug', '--verbose')
    cli.setup_logger.assert_called_once_with(level=scrape.logger.DEBUG, console_level=scrape.logger.DEBUG)
