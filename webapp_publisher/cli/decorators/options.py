"""Shared configuration options for CLI commands"""

from functools import wraps
from typing import Any, Callable, Dict

import click

# (option name, config field, help)
IDENTITY_OPTIONS = (
    ('--authority-url', 'authority_url', 'Identity provider authority URL'),
    ('--username', 'username', 'Azure user name'),
    ('--password', 'password', 'Azure password'),
    ('--client-id', 'client_id', 'Application (client) id'),
    ('--subscription-id', 'subscription_id', 'Azure subscription id'),
)

TARGET_OPTIONS = (
    ('--rg-name', 'rg_name', 'Resource group name'),
    ('--region', 'region', 'Azure region for new resources'),
    ('--web-app-name', 'web_app_name', 'Web App name'),
    ('--app-hosting-plan-name', 'app_hosting_plan_name', 'App Service plan name'),
    ('--rg-template-path', 'rg_template_path', 'Deployment template (JSON)'),
    ('--rg-deployment-name', 'rg_deployment_name', 'Deployment name'),
    ('--directory', 'directory', 'Local site directory to upload'),
)


def _collect(kwargs: Dict[str, Any], options) -> Dict[str, Any]:
    """Move option values out of kwargs, keeping only the ones given"""
    values = {}
    for _, field_name, _ in options:
        value = kwargs.pop(field_name, None)
        if value is not None:
            values[field_name] = value
    return values


def _apply(func: Callable, options) -> Callable:
    for flag, field_name, help_text in reversed(options):
        func = click.option(flag, field_name, default=None, help=help_text)(func)
    return func


def config_file_option(func: Callable) -> Callable:
    """Add ``--config`` pointing at a YAML defaults file"""
    return click.option(
        '--config', '-c', 'config_path',
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help='YAML configuration file with default values'
    )(func)


def identity_options(func: Callable) -> Callable:
    """Add identity options, passed to the command as ``overrides``"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        overrides = kwargs.pop('overrides', {})
        overrides.update(_collect(kwargs, IDENTITY_OPTIONS))
        return func(*args, overrides=overrides, **kwargs)

    return _apply(wrapper, IDENTITY_OPTIONS)


def target_options(func: Callable) -> Callable:
    """Add resource and content options, passed to the command as ``overrides``"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        overrides = kwargs.pop('overrides', {})
        overrides.update(_collect(kwargs, TARGET_OPTIONS))
        return func(*args, overrides=overrides, **kwargs)

    return _apply(wrapper, TARGET_OPTIONS)
