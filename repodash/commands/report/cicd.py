from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from repodash.commands.report.common import load_dashboard_data
from repodash.commands.report.common import print_last_updated
from repodash.core.decorators import handle_errors
from repodash.transforms.grouping import group_by_repository
from repodash.transforms.monthly import calculate_workflow_monthly_stats
from repodash.transforms.workflow import calculate_workflow_stats
from repodash.transforms.workflow import recent_runs
from repodash.utils.formatting import format_duration

app = typer.Typer()
console = Console()


@app.callback(invoke_without_command=True)
@handle_errors
def main(
    data_dir: Path | None = typer.Option(None, help='Data directory'),
    recent: int = typer.Option(0, help='Also list the N most recent runs per repository'),
):
    """
    Workflow success rate and run durations per repository.
    """
    data = load_dashboard_data(data_dir)
    runs_by_repo = group_by_repository(data.repositories, data.workflow_runs)

    summary = Table(title='CI/CD Pipeline Analytics')
    summary.add_column('Repository', style='cyan')
    summary.add_column('Runs', justify='right')
    summary.add_column('Success', style='green', justify='right')
    summary.add_column('Failed', style='red', justify='right')
    summary.add_column('Success Rate', style='magenta', justify='right')
    summary.add_column('Avg Duration', justify='right')
    for repo in data.repositories:
        runs = runs_by_repo[repo.full_name]
        if not runs:
            continue
        stats = calculate_workflow_stats(runs)
        summary.add_row(
            repo.full_name,
            str(stats.total),
            str(stats.successful),
            str(stats.failed),
            f"{stats.success_rate}%",
            f"{stats.avg_duration} min",
        )
    console.print(summary)

    for repo in data.repositories:
        runs = runs_by_repo[repo.full_name]
        if not runs:
            continue
        monthly = Table(title=f"{repo.full_name}: average duration per month")
        monthly.add_column('Month', style='cyan')
        monthly.add_column('Avg Duration (min)', justify='right')
        monthly.add_column('Runs', justify='right')
        for month in calculate_workflow_monthly_stats(runs):
            monthly.add_row(
                month.label,
                '[dim]no data[/dim]' if month.average_duration is None else f"{month.average_duration:.2f}",
                str(month.total_runs),
            )
        console.print(monthly)

        if recent > 0:
            latest = Table(title=f"{repo.full_name}: latest runs")
            latest.add_column('#', justify='right')
            latest.add_column('Date', style='dim')
            latest.add_column('Conclusion')
            latest.add_column('Duration', justify='right')
            for run in reversed(recent_runs(runs, recent)):
                style = 'green' if run.conclusion == 'success' else 'red'
                latest.add_row(
                    str(run.run_number),
                    run.created_at.strftime('%b %d') if run.created_at else '-',
                    f"[{style}]{run.conclusion or 'unknown'}[/{style}]",
                    format_duration(run.duration_seconds),
                )
            console.print(latest)

    print_last_updated(console, data.metadata)
