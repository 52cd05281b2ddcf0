import logging
import os
import sys
from typing import Any

import structlog
from rich.console import Console

# Report tables and CLI messages go to stdout; log lines go to stderr
console = Console()

LEVEL_STYLES = {
    'debug': 'dim',
    'info': 'green',
    'warning': 'yellow',
    'error': 'bold red',
    'critical': 'bold magenta',
}

# Shown right after the event, before any other context
LEADING_KEYS = ('repo', 'path', 'url')


class RichConsoleRenderer:
    """
    Renders a structlog event as one rich line on stderr.

    `_style` in the event dict overrides the style of the whole line.
    """

    def __init__(self, console: Console | None = None, show_timestamp: bool = True):
        self.console = console or Console(stderr=True)
        self.show_timestamp = show_timestamp

    def __call__(self, logger, name, event_dict):
        style = event_dict.pop('_style', None)
        level = event_dict.pop('level', name)
        event = event_dict.pop('event', '')
        component = event_dict.pop('logger', None)
        timestamp = event_dict.pop('timestamp', None)
        exception = event_dict.pop('exception', None)
        stack = event_dict.pop('stack_info', None)
        event_dict.pop('exc_info', None)

        line = []
        if self.show_timestamp and timestamp:
            # 2024-06-15T12:00:01.123456Z -> 12:00:01
            line.append(f"[dim]{str(timestamp)[11:19]}[/dim]")
        level_style = LEVEL_STYLES.get(level, 'white')
        line.append(f"[{level_style}]{level.upper():<7}[/{level_style}]")
        if component:
            line.append(f"[bold]{component}[/bold]")
        line.append(str(event))

        keys = [k for k in LEADING_KEYS if k in event_dict]
        keys += [k for k in event_dict if k not in LEADING_KEYS]
        for key in keys:
            line.append(f"[cyan]{key}[/cyan]={_format_value(event_dict[key])}")

        message = ' '.join(line)
        if exception:
            message += f"\n[red]{exception}[/red]"
        if stack:
            message += f"\n[dim]{stack}[/dim]"

        self.console.print(message, style=style, highlight=False, soft_wrap=True)
        raise structlog.DropEvent


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return f"[green]{value}[/green]"
    return f"[magenta]{value!r}[/magenta]"


def drop_style_processor(logger, method_name, event_dict):
    event_dict.pop('_style', None)
    return event_dict


def setup_logging(level: str = 'INFO', json_logs: bool | None = None) -> None:
    """
    Configure structlog for the CLI.

    JSON lines are emitted when `json_logs` is set, or by default when
    ENV=production (scheduled fetch jobs); otherwise events go through
    RichConsoleRenderer.
    """
    if json_logs is None:
        json_logs = os.getenv('ENV') == 'production'

    logging.basicConfig(format='%(message)s', stream=sys.stderr, level=level, force=True)
    # requests' pool logs every connection; the session hook already logs each response
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt='iso', utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_logs:
        processors += [drop_style_processor, structlog.processors.JSONRenderer()]
    else:
        processors.append(RichConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
