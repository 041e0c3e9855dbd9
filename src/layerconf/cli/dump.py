import click

from layerconf.cli.utils import build_provider, output_error, output_result
from layerconf.core.keys import ConfigKey
from layerconf.core.masking import mask_if_secret


@click.command(name="dump")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.pass_context
def dump(ctx: click.Context, json_output: bool) -> None:
    """Show the resolved configuration with secrets masked.

    \b
    Examples:
        layerconf dump                        # Masked dump for the active profile
        APP_ENV=qa layerconf dump             # Dump the qa profile
        layerconf -D retries=5 dump           # Override a value for this run
        layerconf dump --json-output          # Values and their sources as JSON
    """
    debug = ctx.obj["debug"]
    try:
        provider = build_provider(ctx.obj["layout"], ctx.obj["legacy"])
        if json_output:
            snapshot = provider.snapshot
            result = {
                "profile": snapshot.profile,
                "values": {
                    key.name: mask_if_secret(snapshot.values[key], key.secret) for key in ConfigKey
                },
                "sources": {key.name: snapshot.origins[key] for key in ConfigKey},
            }
            output_result(result, json_output, debug)
        else:
            click.echo(provider.dump_masked(), nl=False)
    except Exception as e:
        output_error(e, json_output, debug)
