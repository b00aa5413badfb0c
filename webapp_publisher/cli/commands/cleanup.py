"""Cleanup command implementation"""

import logging
import sys

import click
from rich.console import Console

from ..decorators import config_file_option, identity_options
from ..utils.output import format_cleanup_result, format_error
from ...api import Publisher
from ...api.exceptions import WebAppPublisherError

logger = logging.getLogger(__name__)
console = Console()


@click.command()
@click.argument('rg_name')
@config_file_option
@identity_options
@click.option('--yes', '-y', is_flag=True, help='Do not ask for confirmation')
def cleanup(rg_name, config_path, overrides, yes):
    """Delete a resource group and everything in it

    Examples:
        webapp-publisher cleanup my-resource-group --yes
    """
    if not yes:
        click.confirm(f"Delete Resource Group '{rg_name}' and all its resources?", abort=True)

    try:
        publisher = Publisher(config_path)
        with console.status(f"[bold yellow]Deleting {rg_name}...[/bold yellow]"):
            result = publisher.cleanup(rg_name, overrides)
    except WebAppPublisherError as e:
        logger.debug("Pipeline error", exc_info=True)
        format_error(e, title="Cleanup Error")
        sys.exit(1)

    format_cleanup_result(result)
