"""Main CLI entry point for auditrollup."""

import sys
from pathlib import Path

import click

from auditrollup import __version__
from auditrollup.core.exceptions import AuditRollupError
from auditrollup.core.logging import (
    configure_logging_from_settings,
    correlation_context,
    get_logger,
)
from auditrollup.core.settings import (
    OUTPUT_FORMATS,
    AuditRollupSettings,
    generate_example_config,
    get_settings,
)
from auditrollup.loader import ReportLoader, find_missing_results, load_report_assets
from auditrollup.reporters import ReportEmbedder, create_reporter
from auditrollup.scoring import ScoreAggregator

logger = get_logger(__name__)

EXIT_SUCCESS = 0  # Report produced
EXIT_FAILURE = 1  # Overall score below --fail-under
EXIT_ERROR = 2  # Error (invalid input, missing result, unreadable template, etc.)


class CLIContext:
    """Context object holding settings for subcommands."""

    def __init__(self) -> None:
        self.settings: AuditRollupSettings | None = None
        self.verbose: bool = False

    def get_settings(self) -> AuditRollupSettings:
        if self.settings is None:
            self.settings = get_settings()
        return self.settings


pass_cli_context = click.make_pass_decorator(CLIContext, ensure=True)


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, path_type=Path),
    help="Path to auditrollup.config.yaml configuration file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.version_option(version=__version__, prog_name="auditrollup")
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None, verbose: bool) -> None:
    """auditrollup - roll audit results up into a scored report.

    Examples:

      # Render a self-contained HTML report
      auditrollup report categories.yaml results.json --output report.html

      # Print category scores and fail CI below 90
      auditrollup report categories.yaml results.json --format console --fail-under 90

      # List configured audits that have no result
      auditrollup check categories.yaml results.json
    """
    ctx.ensure_object(CLIContext)
    cli_ctx = ctx.obj
    cli_ctx.verbose = verbose

    try:
        cli_ctx.settings = get_settings(config_file=config_file)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    configure_logging_from_settings(
        cli_ctx.settings, level="DEBUG" if verbose else None
    )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command(name="report")
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
@click.argument("results_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format (defaults to the configured output_format)",
)
@click.option(
    "--output",
    "-o",
    "output_file",
    type=click.Path(path_type=Path),
    help="Write the report to this file instead of stdout",
)
@click.option(
    "--template",
    "template_path",
    type=click.Path(exists=True, path_type=Path),
    help="HTML template containing the report JSON and JavaScript placeholders",
)
@click.option(
    "--renderer",
    "renderer_path",
    type=click.Path(exists=True, path_type=Path),
    help="JavaScript renderer to inline into the HTML report",
)
@click.option(
    "--fail-under",
    type=click.FloatRange(0, 100),
    default=None,
    help="Exit with status 1 when the overall score is below this value",
)
@pass_cli_context
def report_cmd(
    cli_ctx: CLIContext,
    config_file: Path,
    results_file: Path,
    output_format: str | None,
    output_file: Path | None,
    template_path: Path | None,
    renderer_path: Path | None,
    fail_under: float | None,
) -> None:
    """Build a scored report from a category configuration and audit results.

    CONFIG_FILE maps category ids to their weighted audits (YAML or JSON).
    RESULTS_FILE maps audit ids to results with a score (YAML or JSON).

    Exit Codes:

      0 - Report produced
      1 - Overall score below --fail-under
      2 - Error occurred (invalid input, missing result, bad template, etc.)
    """
    settings = cli_ctx.get_settings()
    output_format = output_format or settings.output_format
    fail_under = fail_under if fail_under is not None else settings.fail_under

    with correlation_context():
        try:
            loader = ReportLoader()
            config = loader.load_config(config_file)
            results = loader.load_results(results_file)

            report = ScoreAggregator(config).build_report(results)

            reporter_config: dict[str, object] = {
                "output_file": output_file,
                "verbose": cli_ctx.verbose,
            }
            if output_format == "html":
                assets = load_report_assets(
                    template_path or settings.template_path,
                    renderer_path or settings.renderer_path,
                )
                reporter_config["embedder"] = ReportEmbedder.from_assets(assets)

            create_reporter(output_format, reporter_config).report(report)
            logger.info(
                "report_generated",
                format=output_format,
                categories=len(report.categories),
                score=report.score,
            )

        except AuditRollupError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(EXIT_ERROR)

        if output_file:
            click.echo(f"Report written to {output_file}", err=True)

        if fail_under is not None and report.score < fail_under:
            click.echo(
                f"Overall score {report.score:.1f} is below {fail_under:.1f}",
                err=True,
            )
            sys.exit(EXIT_FAILURE)


@cli.command(name="check")
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
@click.argument("results_file", type=click.Path(exists=True, path_type=Path))
def check_cmd(config_file: Path, results_file: Path) -> None:
    """Check that every configured audit has a result.

    Exit Codes:

      0 - Every audit has a result
      2 - Results are missing or an input is invalid
    """
    try:
        loader = ReportLoader()
        config = loader.load_config(config_file)
        results = loader.load_results(results_file)
    except AuditRollupError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    missing = find_missing_results(config, results)
    if missing:
        click.echo(f"Missing results for {len(missing)} audit(s):", err=True)
        for category_id, audit_id in missing:
            click.echo(f"  - {audit_id} (category: {category_id})", err=True)
        sys.exit(EXIT_ERROR)

    click.echo(
        f"All {config.audit_count} audit(s) in "
        f"{len(config.categories)} category(ies) have results"
    )


@cli.command(name="example-config")
@click.option(
    "--output",
    "-o",
    "output_file",
    type=click.Path(path_type=Path),
    help="Write the example configuration to this file",
)
def example_config_cmd(output_file: Path | None) -> None:
    """Print or write an example auditrollup.config.yaml."""
    example = generate_example_config(output_file)
    if output_file:
        click.echo(f"Example configuration written to {output_file}")
    else:
        click.echo(example, nl=False)


def main() -> None:
    """Main entry point for the CLI."""
    cli(auto_envvar_prefix="AUDITROLLUP")


if __name__ == "__main__":
    main()
