"""Main entry point for the pr-digest CLI."""

import logging

import click
from rich.console import Console

from .config.settings import get_settings
from .engine.runner import run
from .errors import PrDigestError
from .utils.logging import configure_logging

console = Console(stderr=True)
logger = logging.getLogger("pr_digest")


@click.command()
@click.version_option(package_name="pr-digest")
def main():
    """PR Digest - email a daily summary of a GitHub repository's pull requests."""
    configure_logging(console=console)
    try:
        settings = get_settings()
        configure_logging(settings.log_level, console=console)
        with console.status("[bold green]Building PR digest..."):
            report = run(settings)
    except (PrDigestError, OSError) as exc:  # smtplib errors are OSErrors
        logger.error("Digest run failed: %s", exc)
        raise SystemExit(1)

    console.print(
        f"[green]Report for {report.repository} sent to "
        f"{len(settings.recipients)} recipient(s).[/green]"
    )


if __name__ == "__main__":
    main()
