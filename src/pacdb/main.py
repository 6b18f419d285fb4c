import typing

import typer

import pacdb.cmd.query
from pacdb import common

app = typer.Typer()
app.command()(pacdb.cmd.query.query)
app.command()(pacdb.cmd.query.info)


@app.callback()
def callback(
    debug: typing.Annotated[bool, typer.Option("--debug", help="Enable debug logging")] = False,
):
    """
    Read the pacman local package database.
    """
    if debug:
        common.logging.enable_debug()


def main():
    app()
