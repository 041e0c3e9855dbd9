from pathlib import Path

import click

from layerconf.cli.dump import dump
from layerconf.cli.utils import configure_logging, parse_define
from layerconf.cli.validate import validate
from layerconf.cli.watch import watch
from layerconf.cli.which import which
from layerconf.core import sysprops
from layerconf.core.version import PACKAGE_NAME, PACKAGE_VERSION


def _parse_defines(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> list[tuple[str, str]]:
    return [parse_define(value) for value in values]


@click.group(invoke_without_command=True)
@click.version_option(PACKAGE_VERSION, prog_name=PACKAGE_NAME)
@click.option(
    "-D",
    "--define",
    "defines",
    multiple=True,
    callback=_parse_defines,
    metavar="KEY=VALUE",
    help="Set a system property (repeatable)",
)
@click.option(
    "--layout",
    "layout_path",
    type=click.Path(path_type=Path),
    help="Layout file (default: $LAYERCONF_LAYOUT or ./layerconf.yml)",
)
@click.option("--legacy", is_flag=True, help="Use configuration*.properties file names")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
@click.pass_context
def cli(
    ctx: click.Context,
    defines: list[tuple[str, str]],
    layout_path: Path | None,
    legacy: bool,
    debug: bool,
) -> None:
    """layerconf CLI"""
    configure_logging(debug)
    for name, value in defines:
        sysprops.set_property(name, value)

    ctx.ensure_object(dict)
    ctx.obj.update({"layout": layout_path, "legacy": legacy, "debug": debug})

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(dump)
cli.add_command(validate)
cli.add_command(which)
cli.add_command(watch)


if __name__ == "__main__":
    cli()
