import typer

from . import cicd
from . import overview
from . import packages
from . import releases

app = typer.Typer(name='report', help='Render snapshot reports')

app.add_typer(overview.app, name='overview')
app.add_typer(releases.app, name='releases')
app.add_typer(cicd.app, name='cicd')
app.add_typer(packages.app, name='packages')
