"""CLI entrypoint: Typer app definition and command registration"""

import typer

from fmfix.cli.commands import fix_cmd


app = typer.Typer(name="fmfix", add_completion=False, help="Run a Lua script to fix your frontmatter")

app.command(name="fix")(fix_cmd)
