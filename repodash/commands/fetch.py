from pathlib import Path

import dotenv
import structlog
import typer
from rich.console import Console
from rich.progress import BarColumn
from rich.progress import MofNCompleteColumn
from rich.progress import Progress
from rich.progress import SpinnerColumn
from rich.progress import TaskProgressColumn
from rich.progress import TextColumn
from rich.progress import TimeElapsedColumn
from rich.table import Table

from repodash.core.container import get_container
from repodash.core.decorators import handle_errors
from repodash.core.github import warn_missing_github_token
from repodash.core.stats import FetchStats

dotenv.load_dotenv()

logger = structlog.get_logger('fetch_command')
app = typer.Typer()
console = Console()


@app.callback(invoke_without_command=True)
@handle_errors
def main(
    token: str = typer.Option(
        None, envvar='GITHUB_TOKEN', help='GitHub Token (optional)',
    ),
    data_dir: Path | None = typer.Option(
        None, help='Data directory holding repositories.json and cache/',
    ),
    limit: int | None = typer.Option(None, help='Limit number of repositories'),
):
    """
    Snapshot every configured repository.
    Reads from: data/repositories.json
    Writes to: data/cache/*.json
    """
    container = get_container()
    container.use_data_dir(data_dir)
    config = container.config

    settings = config.load_settings()
    targets = settings.repositories
    if limit:
        targets = targets[:limit]
    if not targets:
        logger.warning(
            'No repositories configured',
            path=str(config.paths.repositories_config_path),
        )

    warn_missing_github_token(token or config.github.token, console)

    service = container.create_snapshot_service(token)
    writer = container.create_snapshot_writer()
    stats = FetchStats(total=len(targets))

    with Progress(
        SpinnerColumn(),
        TextColumn('[progress.description]{task.description}'),
        BarColumn(),
        TaskProgressColumn(),
        MofNCompleteColumn(),
        TextColumn('•'),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task('Fetching repositories...', total=len(targets))
        snapshot = service.run(
            targets, stats, on_progress=lambda _: progress.advance(task),
        )

    # The snapshot is written even when some repositories failed
    writer.write(snapshot)

    table = Table(title='Snapshot Summary')
    table.add_column('Metric', style='cyan')
    table.add_column('Count', style='magenta', justify='right')
    table.add_row('Repositories', f"{stats.fetched}/{stats.total}")
    table.add_row('Failed repositories', str(stats.failed))
    table.add_row('Degraded data kinds', str(stats.degraded))
    table.add_row('Releases', str(stats.releases))
    table.add_row('Workflow runs', str(stats.workflow_runs))
    table.add_row('Package manifests', str(stats.packages))
    console.print(table)

    logger.info(
        'Fetch Complete',
        fetched=stats.fetched,
        failed=stats.failed,
        degraded=stats.degraded,
        elapsed=f"{stats.elapsed_time:.1f}s",
        output=str(config.paths.snapshot_dir),
    )
