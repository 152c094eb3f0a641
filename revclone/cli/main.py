"""revclone CLI"""

import click

from revclone import __version__
from revclone.cli.clone import clone

from .debug import add_debug_option


@click.group()
@click.version_option(__version__, prog_name="revclone")
@click.pass_context
def cli(ctx):
    """
    Clone git repositories at loosely named revisions.
    """
    ctx.ensure_object(dict)


cli.add_command(add_debug_option(clone))

add_debug_option(cli)

if __name__ == "__main__":
    cli(obj={})
