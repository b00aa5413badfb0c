"""Publish command implementation"""

import logging
import sys

import click
from rich.console import Console

from ..decorators import config_file_option, identity_options, target_options
from ..utils.output import format_error, format_publish_result
from ...api import Publisher
from ...api.exceptions import WebAppPublisherError

logger = logging.getLogger(__name__)
console = Console()


@click.command()
@config_file_option
@identity_options
@target_options
@click.option('--poll-interval', type=float, default=None,
              help='Seconds between deployment status polls')
@click.option('--max-poll-attempts', type=int, default=None,
              help='Give up on the deployment after this many polls')
@click.option('--concurrency', 'transfer_concurrency', type=int, default=None,
              help='Concurrent FTPS operations per phase')
def publish(config_path, overrides, poll_interval, max_poll_attempts,
            transfer_concurrency):
    """Publish a site directory to an Azure Web App

    Missing infrastructure (resource group, App Service plan, Web App) is
    provisioned from the deployment template before the upload.

    Values not given on the command line are read from WEBAPP_PUBLISHER_*
    environment variables and then from the configuration file.

    Examples:
        # Publish using values from .webapp-publisher.yaml
        webapp-publisher publish

        # Override the site directory and Web App
        webapp-publisher publish --directory ./site --web-app-name my-site
    """
    tuning = {
        'poll_interval': poll_interval,
        'max_poll_attempts': max_poll_attempts,
        'transfer_concurrency': transfer_concurrency,
    }
    overrides.update({k: v for k, v in tuning.items() if v is not None})

    try:
        publisher = Publisher(config_path)
        with console.status("[bold green]Publishing site...[/bold green]"):
            result = publisher.publish(overrides)
    except WebAppPublisherError as e:
        logger.debug("Pipeline error", exc_info=True)
        format_error(e, title="Publish Error")
        sys.exit(1)

    format_publish_result(result)
