"""Canonical logging field names for structured resilience logs.

Keeping names centralized prevents drift between the boundary runtime, the
envelope builder, and the API surface.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# Failure correlation fields.
ERROR_ID = "error_id"
ERROR_CODE = "error_code"
ERROR_NAME = "error_name"
ERROR_CATEGORY = "error_category"
ERROR_PRIORITY = "error_priority"
RETRYABLE = "retryable"
COMPONENT = "component"
ACTION = "action"
FREQUENCY = "frequency"

# Boundary lifecycle fields.
BOUNDARY = "boundary"
RETRY_COUNT = "retry_count"
RETRY_DELAY_MS = "retry_delay_ms"
MAX_RETRIES = "max_retries"

# Event names.
FAILURE_CAPTURED_EVENT = "failure_captured"
RETRY_SCHEDULED_EVENT = "retry_scheduled"
BOUNDARY_RESET_EVENT = "boundary_reset"
REPORT_SUBMITTED_EVENT = "error_report_submitted"
REPORT_FAILED_EVENT = "error_report_failed"
REPORT_RECEIVED_EVENT = "error_report_received"
RATE_LIMITED_EVENT = "rate_limited"

# Report outcome fields.
OUTCOME = "outcome"
SOURCE = "source"
REPORT_SUBMITTED = "submitted"
REPORT_FAILED = "failed"
REPORT_RECEIVED = "received"

# Request fields.
METHOD = "method"
PATH = "path"
STATUS_CODE = "status_code"
CLIENT = "client"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
