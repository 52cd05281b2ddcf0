from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from repodash.commands.report.common import load_dashboard_data
from repodash.commands.report.common import print_last_updated
from repodash.core.decorators import handle_errors
from repodash.utils.formatting import format_count
from repodash.utils.formatting import format_relative_time

app = typer.Typer()
console = Console()


@app.callback(invoke_without_command=True)
@handle_errors
def main(
    data_dir: Path | None = typer.Option(None, help='Data directory'),
):
    """
    Repository overview: popularity counters and activity.
    """
    data = load_dashboard_data(data_dir)

    if not data.repositories:
        console.print('[yellow]No repositories in the snapshot. Run `repodash fetch` first.[/yellow]')
        return

    table = Table(title=f"Repositories ({len(data.repositories)})")
    table.add_column('Repository', style='cyan')
    table.add_column('Language', style='green')
    table.add_column('Stars', style='magenta', justify='right')
    table.add_column('Forks', justify='right')
    table.add_column('Open Issues', justify='right')
    table.add_column('License')
    table.add_column('Last Push', style='dim')
    for repo in data.repositories:
        table.add_row(
            repo.full_name,
            repo.language or '-',
            format_count(repo.stargazers_count),
            format_count(repo.forks_count),
            format_count(repo.open_issues_count),
            (repo.license.spdx_id if repo.license else None) or '-',
            format_relative_time(repo.pushed_at),
        )
    console.print(table)
    print_last_updated(console, data.metadata)
