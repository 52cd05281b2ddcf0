from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from repodash.commands.report.common import load_dashboard_data
from repodash.commands.report.common import print_last_updated
from repodash.core.decorators import handle_errors
from repodash.transforms.releases import summarize_releases
from repodash.utils.formatting import format_date

app = typer.Typer()
console = Console()


def _version_cell(release, stale: bool, style: str) -> str:
    if release is None:
        return '[dim]-[/dim]'
    date_style = 'red' if stale else 'dim'
    return (
        f"[{style}]{release.tag_name}[/{style}] "
        f"[{date_style}]{format_date(release.released_at)}[/{date_style}]"
    )


@app.callback(invoke_without_command=True)
@handle_errors
def main(
    data_dir: Path | None = typer.Option(None, help='Data directory'),
):
    """
    Latest stable/beta versions and monthly release cadence.
    """
    data = load_dashboard_data(data_dir)
    summaries = summarize_releases(data.repositories, data.releases)

    versions = Table(title='Latest Versions')
    versions.add_column('Repository', style='cyan')
    versions.add_column('Latest Stable')
    versions.add_column('Latest Beta')
    versions.add_column('Releases', justify='right')
    for summary in summaries:
        versions.add_row(
            summary.repository.full_name,
            _version_cell(summary.latest_stable, summary.stable_is_stale, 'green'),
            _version_cell(summary.latest_beta, summary.beta_is_stale, 'yellow'),
            str(len(summary.releases)),
        )
    console.print(versions)

    for summary in summaries:
        if not summary.releases:
            continue
        cadence = Table(title=f"{summary.repository.full_name}: releases per month")
        cadence.add_column('Month', style='cyan')
        cadence.add_column('Stable', style='green', justify='right')
        cadence.add_column('Beta', style='yellow', justify='right')
        cadence.add_column('Total', style='magenta', justify='right')
        for month in summary.monthly:
            cadence.add_row(
                month.label, str(month.stable), str(month.beta), str(month.total),
            )
        console.print(cadence)

    print_last_updated(console, data.metadata)
