from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from repodash.commands.report.common import load_dashboard_data
from repodash.commands.report.common import print_last_updated
from repodash.core.container import get_container
from repodash.core.decorators import handle_errors
from repodash.utils.packages import build_package_matrix
from repodash.utils.packages import VersionStatus

app = typer.Typer()
console = Console()

STATUS_STYLES = {
    VersionStatus.MISSING: 'dim',
    VersionStatus.UNTRACKED: 'cyan',
    VersionStatus.COMPLIANT: 'green',
    VersionStatus.OUTDATED: 'red',
}


@app.callback(invoke_without_command=True)
@handle_errors
def main(
    data_dir: Path | None = typer.Option(None, help='Data directory'),
):
    """
    Tracked package versions across repositories.
    """
    data = load_dashboard_data(data_dir)
    settings = get_container().config.load_settings()
    rows = build_package_matrix(data.packages, settings.tracked_packages)

    table = Table(title=f"Packages across {len(data.packages)} repositories")
    table.add_column('Package', style='bold')
    table.add_column('Target', style='dim')
    for manifest in data.packages:
        table.add_column(manifest.repo_full_name)
    for row in rows:
        cells = []
        for manifest in data.packages:
            cell = row.cells[manifest.repo_full_name]
            style = STATUS_STYLES[cell.status]
            cells.append(f"[{style}]{cell.version}[/{style}]")
        table.add_row(row.package_name, row.target_version or '-', *cells)
    console.print(table)

    toolchain = Table(title='Toolchain')
    toolchain.add_column('Repository', style='cyan')
    toolchain.add_column('Node')
    toolchain.add_column('Yarn')
    toolchain.add_column('Package Manager')
    for manifest in data.packages:
        toolchain.add_row(
            manifest.repo_full_name,
            manifest.node_version or '-',
            manifest.yarn_version or '-',
            manifest.package_manager or '-',
        )
    console.print(toolchain)
    print_last_updated(console, data.metadata)
