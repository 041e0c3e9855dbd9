import click

from layerconf.cli.utils import build_provider, output_error, output_result


@click.command(name="validate")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.pass_context
def validate(ctx: click.Context, json_output: bool) -> None:
    """Check that the configuration resolves and validates.

    Builds a snapshot exactly as an application would and reports the first
    problem found. Exits with status 1 when the configuration is invalid.

    \b
    Examples:
        layerconf validate                   # Validate the active profile
        APP_ENV=prod layerconf validate      # Validate the prod profile
        layerconf validate --json-output     # Machine-readable result
    """
    debug = ctx.obj["debug"]
    try:
        provider = build_provider(ctx.obj["layout"], ctx.obj["legacy"])
        snapshot = provider.snapshot
        if json_output:
            output_result({"valid": True, "profile": snapshot.profile}, json_output, debug)
        else:
            click.echo(f"Configuration is valid (profile: {snapshot.profile})")
    except Exception as e:
        output_error(e, json_output, debug)
