import click

from layerconf.cli.utils import build_provider, output_error, output_result
from layerconf.core.keys import ConfigKey
from layerconf.core.masking import mask_if_secret
from layerconf.core.similarity import find_similar_key


def find_key(name: str) -> ConfigKey | None:
    """Look a key up by name, env var or system property, ignoring case."""
    wanted = name.strip().lower()
    for key in ConfigKey:
        if wanted in (key.name.lower(), key.env_var.lower(), key.sys_prop.lower()):
            return key
    return None


@click.command(name="which")
@click.argument("name")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.pass_context
def which(ctx: click.Context, name: str, json_output: bool) -> None:
    """Show a key's value and the source that supplied it.

    NAME can be the key name, its environment variable or its system
    property name. Secret values are masked.

    \b
    Examples:
        layerconf which READ_TIMEOUT_MS
        layerconf which readTimeoutMs
        layerconf which API_TOKEN --json-output
    """
    debug = ctx.obj["debug"]
    try:
        key = find_key(name)
        if key is None:
            suggestion = find_similar_key(name, sorted(ConfigKey.known_names()))
            hint = f" - Did you mean '{suggestion}'?" if suggestion else ""
            raise ValueError(f"Unknown configuration key '{name}'{hint}")

        provider = build_provider(ctx.obj["layout"], ctx.obj["legacy"])
        value = mask_if_secret(provider.get(key), key.secret)
        source = provider.source_of(key)
        if json_output:
            output_result({"key": key.name, "value": value, "source": source}, json_output, debug)
        else:
            click.echo(f"{key.name} = {value} (source: {source})")
    except Exception as e:
        output_error(e, json_output, debug)
