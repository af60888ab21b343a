import json
import logging
import sys
from pathlib import Path

import click

from .config import LintConfig
from .document import load_document
from .errors import LintError
from .validator import Validator

# Exit statuses
EXIT_CLEAN = 0
EXIT_PROBLEMS = 1
EXIT_ERROR = 2


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--convention", default=None, type=click.Choice(["snake", "camel"]), help="Casing for names")
@click.option(
    "--external-docs",
    is_flag=True,
    default=False,
    help="Flag implementation-specific markup in titles and descriptions",
)
@click.option(
    "--report-unsupported",
    is_flag=True,
    default=False,
    help="Report unanalyzable schemas as problems instead of stopping",
)
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def openapi_lint(config, convention, external_docs, report_unsupported, verbose, path):
    """Lint the OpenAPI description at PATH (JSON or YAML)."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    if config is not None:
        with open(config) as f:
            lint_config = LintConfig.from_dict(json.load(f))
    else:
        lint_config = LintConfig()

    # CLI flags override the config file
    if convention is not None:
        lint_config = LintConfig.from_dict({**lint_config.to_dict(), "naming_convention": convention})
    if external_docs:
        lint_config.check_external_docs = True
    if report_unsupported:
        lint_config.report_unsupported = True

    try:
        document = load_document(path)
        errors = Validator(lint_config).validate(document)
    except LintError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    if errors:
        click.echo("\n\n".join(errors), err=True)
        sys.exit(EXIT_PROBLEMS)
    sys.exit(EXIT_CLEAN)
