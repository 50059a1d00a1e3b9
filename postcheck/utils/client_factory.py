"""Client factory for the CLI.

Builds settings and a PostsClient from the options stored on the Typer
context, so commands do not repeat the resolution logic.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import typer
from rich.console import Console

from ..client import PostsClient
from ..config import Settings, load_settings
from ..render import OutputFormatter


def settings_from_context(
    ctx: typer.Context,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    config_file: Optional[Path] = None,
) -> Settings:
    """Resolve settings for a command.

    Command options win over the environment, which wins over the config
    file. ``--debug`` on the root command is applied last.

    Raises:
        ConfigError: If the resolved settings are invalid
    """
    obj: Dict[str, Any] = ctx.obj or {}
    overrides: Dict[str, Any] = {"base_url": base_url, "timeout": timeout}
    if obj.get("debug"):
        overrides["debug"] = True

    return load_settings(config_file=config_file, overrides=overrides)


def get_client_and_formatter(
    ctx: typer.Context,
    settings: Settings,
) -> Tuple[PostsClient, OutputFormatter]:
    """Create a client and an output formatter sharing the context console."""
    obj: Dict[str, Any] = ctx.obj or {}
    console: Console = obj.get("console") or Console()
    client = PostsClient(settings, console=Console(stderr=True))
    return client, OutputFormatter(console)
