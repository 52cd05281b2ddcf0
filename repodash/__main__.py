import typer

from repodash.__version__ import __version__
from repodash.commands import fetch
from repodash.commands.report import app as report_app
from repodash.core.logging import console
from repodash.core.logging import setup_logging

app = typer.Typer(
    help='repodash: snapshot GitHub repositories and report on releases, CI and packages.',
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)

app.add_typer(fetch.app, name='fetch')
app.add_typer(report_app, name='report')


def version_callback(value: bool):
    if value:
        console.print(f"repodash {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    debug: bool = typer.Option(False, '--debug', help='Enable debug logging'),
    version: bool = typer.Option(
        False, '--version', callback=version_callback, is_eager=True,
        help='Show the version and exit',
    ),
):
    """
    repodash CLI - a static dashboard for a fixed set of repositories.
    """
    level = 'DEBUG' if debug else 'INFO'
    setup_logging(level=level)


if __name__ == '__main__':
    app()
