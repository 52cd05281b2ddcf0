import logging

import pytest
import structlog
from rich.console import Console

from repodash.core.logging import drop_style_processor
from repodash.core.logging import RichConsoleRenderer
from repodash.core.logging import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


def render(renderer, event_dict):
    with pytest.raises(structlog.DropEvent):
        renderer(None, 'info', event_dict)
    return renderer.console.export_text()


def test_renderer_puts_repo_first():
    renderer = RichConsoleRenderer(Console(record=True, width=300))

    output = render(renderer, {
        'event': 'Repository fetched',
        'level': 'info',
        'logger': 'snapshot_service',
        'timestamp': '2024-06-15T12:00:01.123456Z',
        'releases': 3,
        'repo': 'acme/app',
    })

    assert output.startswith('12:00:01 INFO    snapshot_service Repository fetched')
    assert output.index('repo=acme/app') < output.index('releases=3')


def test_renderer_without_timestamp_and_with_exception():
    renderer = RichConsoleRenderer(Console(record=True, width=300), show_timestamp=False)

    output = render(renderer, {
        'event': 'Unexpected error',
        'level': 'error',
        'timestamp': '2024-06-15T12:00:01Z',
        'exception': 'Traceback: boom',
        '_style': 'red',
    })

    assert output.startswith('ERROR   Unexpected error')
    assert 'Traceback: boom' in output
    assert '_style' not in output


def test_drop_style_processor():
    assert drop_style_processor(None, 'info', {'event': 'x', '_style': 'yellow'}) == {'event': 'x'}


def test_setup_logging_json(restore_logging):
    setup_logging('DEBUG', json_logs=True)

    processors = structlog.get_config()['processors']
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)
    assert drop_style_processor in processors
    assert logging.getLogger('urllib3').level == logging.WARNING


def test_setup_logging_console_by_default(restore_logging, monkeypatch):
    monkeypatch.delenv('ENV', raising=False)
    setup_logging()

    assert isinstance(structlog.get_config()['processors'][-1], RichConsoleRenderer)
    assert logging.getLogger().level == logging.INFO


def test_setup_logging_production_env(restore_logging, monkeypatch):
    monkeypatch.setenv('ENV', 'production')
    setup_logging()

    assert isinstance(structlog.get_config()['processors'][-1], structlog.processors.JSONRenderer)
