from unittest.mock import MagicMock

from rich.console import Console
from structlog.testing import capture_logs

from repodash.core.client import get_http_client
from repodash.core.github import warn_missing_github_token


def test_get_http_client_has_adapters():
    session = get_http_client()
    assert 'https://' in session.adapters
    assert 'http://' in session.adapters


def test_get_http_client_does_not_retry():
    session = get_http_client()
    adapter = session.get_adapter('https://api.github.com')
    assert adapter.max_retries.total == 0


def test_logging_hook_reports_rate_limit():
    session = get_http_client()
    hook = session.hooks['response'][0]

    response = MagicMock()
    response.request.method = 'GET'
    response.url = 'https://api.github.com/repos/acme/app'
    response.status_code = 200
    response.ok = True
    response.content = b'{}'
    response.elapsed.total_seconds.return_value = 0.25
    response.headers = {'X-RateLimit-Remaining': '59', 'X-RateLimit-Limit': '60'}

    with capture_logs() as captured:
        hook(response)

    assert captured[0]['event'] == 'HTTP Request'
    assert captured[0]['status'] == 200
    assert captured[0]['ratelimit'] == '59/60'


def test_warn_missing_github_token():
    console = Console(record=True, width=120)
    assert warn_missing_github_token('token', console) is True
    assert console.export_text() == ''

    assert warn_missing_github_token(None, console) is False
    assert 'No GitHub Token' in console.export_text()
