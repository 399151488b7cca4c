"""
baud command-line interface.

Usage:
    baud bbs.example.com
    baud bbs.example.com 2323 --timeout 10
    baud bbs.example.com --expansions shortcuts.txt
    baud bbs.example.com --scripts ./scripts --patterns triggers.txt
"""

from __future__ import annotations

import asyncio

import click

from baud.config import configure_settings, get_settings
from baud.logging import setup_logging
from baud.session.connect import telnet_connect


@click.command()
@click.argument("host")
@click.argument("port", type=click.IntRange(1, 65535), required=False)
@click.option(
    "--timeout",
    "-t",
    type=click.FloatRange(1.0, 300.0),
    help="Connect timeout in seconds",
)
@click.option(
    "--expansions",
    type=click.Path(dir_okay=False),
    help="File of key=value text expansions",
)
@click.option(
    "--scripts",
    type=click.Path(file_okay=False),
    help="Directory of automation scripts",
)
@click.option(
    "--patterns",
    type=click.Path(dir_okay=False),
    help="File of 'regex | script | comment' triggers",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Minimum log level",
)
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write logs to this file")
@click.version_option(package_name="baud")
def main(
    host: str,
    port: int | None,
    timeout: float | None,
    expansions: str | None,
    scripts: str | None,
    patterns: str | None,
    log_level: str | None,
    log_file: str | None,
) -> None:
    """Telnet client for BBS systems.

    Connects to HOST on PORT (default 23). Press Ctrl+] and type 'quit'
    to disconnect.

    Examples:

        baud bbs.example.com

        baud bbs.example.com 2323 -t 10

        baud bbs.example.com --scripts ./scripts --patterns triggers.txt
    """
    overrides: dict[str, object] = {}
    if log_level:
        overrides["log_level"] = log_level.upper()
    if log_file:
        overrides["log_file"] = log_file
    settings = configure_settings(**overrides) if overrides else get_settings()

    setup_logging(settings.log_level, settings.log_json, settings.log_file)

    code = asyncio.run(
        telnet_connect(
            host,
            port if port is not None else settings.default_port,
            timeout=timeout,
            expansions_path=expansions,
            scripts_dir=scripts,
            patterns_path=patterns,
        )
    )
    raise SystemExit(code)


if __name__ == "__main__":
    main()
