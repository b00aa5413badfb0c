"""Global constants for webapp-publisher"""

APP_NAME = "webapp-publisher"
LOG_FORMAT = "%(message)s"

# Project configuration
PROJECT_CONFIG_FILE = ".webapp-publisher.yaml"

# Identity and management endpoints
DEFAULT_MANAGEMENT_SCOPE = "https://management.azure.com/.default"
DEFAULT_TENANT = "organizations"

# Template deployment
DEFAULT_POLL_INTERVAL = 10  # seconds
DEFAULT_MAX_POLL_ATTEMPTS = 90  # 15 minutes at the default interval
TERMINAL_SUCCESS_STATES = ("Succeeded",)
TERMINAL_FAILURE_STATES = ("Failed", "Canceled")

# Transfer
DEFAULT_TRANSFER_PROTOCOL = "FTP"
DEFAULT_REMOTE_ROOT = "/site/wwwroot"
DEFAULT_TRANSFER_CONCURRENCY = 4
DEFAULT_FTP_PORT = 21
DEFAULT_FTP_TIMEOUT = 60  # seconds

# Pipeline stage names
STAGE_CONFIG = "config"
STAGE_CREDENTIALS = "credentials"
STAGE_RESOURCES = "resources"
STAGE_PUBLISHING_CREDENTIALS = "publishing_credentials"
STAGE_TRANSFER = "transfer"
STAGE_CLEANUP = "cleanup"

PIPELINE_STAGES = (
    STAGE_CREDENTIALS,
    STAGE_RESOURCES,
    STAGE_PUBLISHING_CREDENTIALS,
    STAGE_TRANSFER,
)


# Error codes
class ErrorCode:
    CONFIGURATION_ERROR = "WP001"
    AUTHENTICATION_FAILED = "WP002"
    RESOURCE_NOT_FOUND = "WP003"
    REMOTE_OPERATION_FAILED = "WP004"
    DEPLOYMENT_FAILED = "WP005"
    DEPLOYMENT_TIMEOUT = "WP006"
    PUBLISH_PROFILE_NOT_FOUND = "WP007"
    FILESYSTEM_ERROR = "WP008"
    TRANSFER_FAILED = "WP009"
    CANCELLED = "WP010"


# Resource-group existence quirk: a 404 carrying one of these codes means
# "does not exist" rather than a failure
RESOURCE_GROUP_NOT_FOUND_CODES = ("NotFound", "ResourceGroupNotFound")

# Environment variables
ENV_PREFIX = "WEBAPP_PUBLISHER_"
ENV_CONFIG_PATH = "WEBAPP_PUBLISHER_CONFIG"
ENV_DEPLOYMENT_USER = "WEBAPP_PUBLISHER_DEPLOYMENT_USER"
ENV_DEPLOYMENT_PASSWORD = "WEBAPP_PUBLISHER_DEPLOYMENT_PASSWORD"

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"

MSG_PUBLISH_SUCCESS = f"{EMOJI_SUCCESS} Published {{files}} file(s) to {{app}}"
MSG_CLEANUP_SUCCESS = f"{EMOJI_SUCCESS} Resource Group '{{rg}}' deleted"
