"""CLI entrypoint: Typer app definition and command registration"""

import typer

from blockpress.cli.commands import import_cmd, init_cmd, list_cmd, parse_cmd, render_cmd


app = typer.Typer(name="blockpress", no_args_is_help=True, help="Article HTML to typed content blocks to rendered pages")

app.command(name="init")(init_cmd)
app.command(name="import")(import_cmd)
app.command(name="parse")(parse_cmd)
app.command(name="render")(render_cmd)
app.command(name="list")(list_cmd)
