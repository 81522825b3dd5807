"""incbundler CLI"""

import click

from incbundler import __version__
from incbundler.cli.build import build
from incbundler.cli.cache import cache

from .utils.logging import configure_logging


def _set_debug(ctx, param, value: bool):
    """Callback function for debug flag"""
    ctx.ensure_object(dict)
    ctx.obj["DEBUG"] = value
    configure_logging(value)
    return value


@click.group()
@click.version_option(__version__, prog_name="incbundle")
@click.option(
    "--debug/--no-debug",
    is_eager=True,
    expose_value=False,
    callback=_set_debug,
    help="Enable debug mode",
)
@click.pass_context
def cli(ctx):
    """
    Incremental JavaScript bundler.
    """
    ctx.ensure_object(dict)


cli.add_command(build)
cli.add_command(cache)

if __name__ == "__main__":
    cli(obj={})
