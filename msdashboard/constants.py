"""Shared constants for MS Dashboard."""

SERVER_NAME = "MS Dashboard"
SERVER_VERSION = "0.1.0"

# Network defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 9100

MANAGEMENT_API_PREFIX = "/manage/v1"

# Logging defaults
LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"

# Health polling
HEALTH_ENDPOINT = "health"
DEFAULT_SWEEP_INTERVAL = 30.0  # seconds between sweeps
DEFAULT_HEALTH_TIMEOUT = 10.0  # per-request transport timeout

# Metadata key holding the endpoint map of a service instance
ENDPOINTS_METADATA_KEY = "endpoints"
