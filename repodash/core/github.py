"""GitHub authentication hints."""
from rich.console import Console
from rich.panel import Panel


def warn_missing_github_token(token: str | None, console: Console | None = None) -> bool:
    """
    Print a notice when no GitHub token is configured.

    Fetching still works without one, but unauthenticated requests are
    limited to 60 per hour, which a handful of repositories can exhaust.
    Returns True when a token is present.
    """
    if token:
        return True

    console = console or Console()
    console.print()
    console.print(
        Panel(
            '[bold]No GitHub Token[/]\n\n'
            'Requests will be sent unauthenticated and share a limit of [bold]60 per hour[/].\n\n'
            '1. Create a token at: [link=https://github.com/settings/personal-access-tokens][blue]github.com/settings/personal-access-tokens[/link]\n'
            '2. Select [italic]Public repositories[/italic] under Repository access (no extra permissions needed).\n'
            '3. Set it as an environment variable:\n'
            '   [bold]export GITHUB_TOKEN=your_token_here[/]\n\n'
            'Alternatively, use the [bold]--token[/] command-line option.',
            title='[bold yellow]Warning[/]',
            title_align='left',
            border_style='yellow',
            padding=(1, 2),
        ),
    )
    return False
