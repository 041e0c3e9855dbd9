import time

import click

from layerconf.cli.utils import apply_root_log_level, build_provider, output_error


@click.command(name="watch")
@click.pass_context
def watch(ctx: click.Context) -> None:
    """Watch the configuration files and reload on change.

    Prints the active profile after every successful reload. Invalid edits
    are reported and the previous configuration stays in effect. Stop with
    Ctrl+C.

    \b
    Examples:
        layerconf watch
        APP_ENV=dev layerconf --debug watch
    """
    debug = ctx.obj["debug"]
    try:
        provider = build_provider(ctx.obj["layout"], ctx.obj["legacy"], watch=True)
    except Exception as e:
        output_error(e, False, debug)

    def on_change(reason: str) -> None:
        provider.reload(reason)
        apply_root_log_level(debug)
        click.echo(f"Reloaded ({reason}) - profile: {provider.profile}")

    try:
        click.echo(f"Watching configuration for profile: {provider.profile}")
        apply_root_log_level(debug)
        # Replace the provider's own callback so reloads are reported
        provider.watcher.set_reload_callback(on_change)
        for path in sorted(provider.watcher.watched_files):
            click.echo(f"  {path}")
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        click.echo("Stopping watcher")
    except Exception as e:
        output_error(e, False, debug)
    finally:
        provider.shutdown()
