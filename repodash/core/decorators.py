import functools
from collections.abc import Callable
from typing import Any

import requests
import structlog
import typer
from pydantic import ValidationError

from repodash.core.logging import console

logger = structlog.get_logger('cli')

# Shown with HTTP errors that usually mean a missing or weak token
TOKEN_HINT_STATUSES = {401, 403, 429}


def describe_request_error(error: requests.RequestException) -> str:
    response = error.response
    if response is None:
        return str(error)
    message = f"{response.status_code} from {response.url}"
    if response.status_code in TOKEN_HINT_STATUSES:
        message += ' (check GITHUB_TOKEN or pass --token)'
    return message


def describe_validation_error(error: ValidationError, limit: int = 3) -> str:
    """First few pydantic errors as 'loc: msg' lines."""
    lines = [
        f"{'.'.join(str(p) for p in e['loc']) or '<root>'}: {e['msg']}"
        for e in error.errors()[:limit]
    ]
    if error.error_count() > limit:
        lines.append(f"... and {error.error_count() - limit} more")
    return '\n  '.join(lines)


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Turn errors escaping a CLI command into a red message and an exit code."""
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except requests.RequestException as e:
            console.print(f"[bold red]GitHub API Error:[/] {describe_request_error(e)}")
            logger.debug('Request failed', command=func.__name__, exc_info=True)
            raise typer.Exit(1)
        except ValidationError as e:
            # Before ValueError: pydantic's ValidationError subclasses it
            console.print(f"[bold red]Invalid Data:[/]\n  {describe_validation_error(e)}")
            logger.debug('Invalid data', command=func.__name__, exc_info=True)
            raise typer.Exit(1)
        except ValueError as e:
            console.print(f"[bold red]Validation Error:[/] {e}")
            logger.debug('Validation error', command=func.__name__, exc_info=True)
            raise typer.Exit(1)
        except KeyboardInterrupt:
            console.print('\n[yellow]Interrupted.[/]')
            raise typer.Exit(130)
        except Exception as e:
            console.print(f"[bold red]Unexpected Error:[/] {e}")
            logger.exception('Unexpected error', command=func.__name__)
            raise typer.Exit(1)
    return wrapper
