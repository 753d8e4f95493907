"""schemapush CLI — the main entry point."""

import logging
import sys

import click
from rich.console import Console
from rich.markup import escape

from schemapush import __version__
from schemapush.errors import ConfigError, SchemaPushError

err_console = Console(stderr=True, soft_wrap=True)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr")
def main(verbose: bool):
    """schemapush — publish self-describing JSON Schemas to a registry."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


# ── Push ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("input_dir", type=click.Path(path_type=str))
@click.option("--registry-root", "-r", default=None, help="Registry URL (without /api)")
@click.option("--api-key", "-k", default=None, help="API key (UUID) with write permissions")
@click.option("--public", is_flag=True, help="Make uploaded schemas public")
@click.option("--legacy", is_flag=True, help="Issue temporary keys first (old servers)")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="HTTP timeout in seconds",
)
@click.option("--config", "config_path", default=None, help="YAML config file")
def push(
    input_dir: str,
    registry_root: str | None,
    api_key: str | None,
    public: bool,
    legacy: bool,
    timeout: float | None,
    config_path: str | None,
):
    """Upload every schema in INPUT_DIR to the registry.

    With --legacy, the API key must be the master key: temporary keys
    are issued for this run and revoked afterwards.
    """
    from schemapush.config import load_config, normalize_registry_root, parse_api_key
    from schemapush.push import process

    try:
        config = load_config(config_path)
        root = normalize_registry_root(registry_root or config.registry_root)
        key = parse_api_key(api_key or config.api_key)
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    try:
        code = process(
            input_dir,
            root,
            key,
            is_public=public or config.public,
            legacy=legacy or config.legacy,
            timeout=config.timeout if timeout is None else timeout,
        )
    except SchemaPushError as e:
        err_console.print(f"[red]ERROR:[/] {escape(str(e))}", highlight=False)
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
