"""Click-based CLI for faqbot.

Defines the top-level command group, the ``run`` subcommand with the
bot-configuration flags, and ``check`` for validating a knowledge base file.
Precedence: CLI flag > env var > .env > default. ``apply_args_to_env()`` sets
os.environ for explicitly provided flags so Config reads the overridden values.
"""

import os
from pathlib import Path

import click

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _validate_positive_int(
    _ctx: click.Context, _param: click.Parameter, value: int | None
) -> int | None:
    if value is not None and value <= 0:
        raise click.BadParameter("must be positive")
    return value


class _DefaultToRun(click.Group):
    """Click group that runs the ``run`` command when invoked without a subcommand."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        # If the first arg is not a known command and not --help/--version,
        # prepend "run" so flags like -v go to the run command.
        if args and args[0] not in self.commands and not args[0].startswith("--"):
            args = ["run", *args]
        return super().parse_args(ctx, args)


@click.group(
    cls=_DefaultToRun,
    invoke_without_command=True,
    help="Telegram FAQ bot with category browsing and search.",
)
@click.version_option(package_name="faqbot", prog_name="faqbot")
@click.pass_context
def cli(ctx: click.Context) -> None:
    if ctx.invoked_subcommand is None:
        ctx.invoke(run_cmd)


# --- run command -----------------------------------------------------------

# Mapping: click option name → environment variable name
_FLAG_TO_ENV: list[tuple[str, str]] = [
    ("config_dir", "FAQBOT_DIR"),
    ("kb_file", "FAQBOT_KB_FILE"),
    ("page_size", "SEARCH_PAGE_SIZE"),
]


def apply_args_to_env(**kwargs: object) -> None:
    """Set environment variables from explicitly provided CLI flags.

    Call BEFORE Config instantiation to ensure CLI flags take precedence.
    Only sets env vars for flags that were explicitly provided (not None).
    """
    verbose = kwargs.get("verbose", False)
    log_level = kwargs.get("log_level")

    if verbose:
        os.environ["FAQBOT_LOG_LEVEL"] = "DEBUG"
    elif log_level is not None:
        os.environ["FAQBOT_LOG_LEVEL"] = str(log_level).upper()

    for attr, env_var in _FLAG_TO_ENV:
        value = kwargs.get(attr)
        if value is None:
            continue
        if isinstance(value, Path):
            os.environ[env_var] = str(value.expanduser().resolve())
        else:
            os.environ[env_var] = str(value)


@cli.command("run")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level.",
)
@click.option(
    "--config-dir",
    type=click.Path(path_type=Path),
    default=None,
    envvar="FAQBOT_DIR",
    help="Config directory (default: ~/.faqbot).",
)
@click.option(
    "--kb-file",
    type=click.Path(path_type=Path),
    default=None,
    envvar="FAQBOT_KB_FILE",
    help="Knowledge base JSON file (default: knowledge_base.json).",
)
@click.option(
    "--page-size",
    type=int,
    default=None,
    callback=_validate_positive_int,
    envvar="SEARCH_PAGE_SIZE",
    help="Search results per page (default: 6).",
)
def run_cmd(**kwargs: object) -> None:
    """Start the bot with optional overrides."""
    apply_args_to_env(**kwargs)

    from .main import run_bot

    run_bot()


# --- check command ---------------------------------------------------------


@cli.command("check")
@click.argument("kb_file", type=click.Path(path_type=Path))
def check_cmd(kb_file: Path) -> None:
    """Validate a knowledge base file and print its size."""
    from .knowledge_base import KnowledgeBase, KnowledgeBaseError

    try:
        kb = KnowledgeBase.load(kb_file)
    except KnowledgeBaseError as e:
        raise click.ClickException(str(e)) from e

    categories = kb.list_categories()
    subcategories = sum(len(kb.list_subcategories(c.slug)) for c in categories)
    click.echo(f"Articles: {len(kb)}")
    click.echo(f"Categories: {len(categories)}")
    click.echo(f"Subcategories: {subcategories}")
