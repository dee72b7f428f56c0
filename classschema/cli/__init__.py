"""Command-line interface for inspecting class schemas."""

import rich_click as click

from .. import __version__
from ..core.config import settings
from ..core.logging import configure_logging
from .show import show_command

# Configure rich-click styling
click.rich_click.TEXT_MARKUP = "rich"
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.STYLE_OPTION = "bold cyan"
click.rich_click.STYLE_ARGUMENT = "bold yellow"
click.rich_click.STYLE_COMMAND = "bold green"
click.rich_click.STYLE_SWITCH = "bold blue"


@click.group(name="classschema")
@click.version_option(version=__version__, prog_name="classschema")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="🔍 **Log schema construction** at debug level",
)
def main(verbose: bool) -> None:
    """🧬 **Class schema** - metadata of managed domain classes.

    Inspect how entities, value objects, controllers and services are
    classified, which properties and methods they expose and which
    validators and injection points they declare.
    """
    configure_logging(
        environment=settings.environment,
        log_level="DEBUG" if verbose else "WARNING",
        json_logs=settings.json_logs,
    )


# Add commands to the group
main.add_command(show_command)


if __name__ == "__main__":
    main()


__all__ = ["main"]
