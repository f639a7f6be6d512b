"""
Helper package for the batcher.
Provides configuration, logging, error, token and SQL utilities.
"""

from .task import (
    check_valid_task,
    check_operation_arguments,
    get_task_name_from_function,
    get_task_name_from_interface,
)

from .error import (
    BatcherError,
    NotFoundError,
    TransportPreconditionError,
)

from .database import (
    Database,
    DatabaseConfiguration,
    new_database,
)

from .logging import (
    BatcherLogger,
    ColorFormatter,
    get_logger,
    setup_logging,
)

from .token import (
    get_token,
    hmac_base64,
)

from .url import (
    build_url,
)

__all__ = [
    # Task utilities
    "check_valid_task",
    "check_operation_arguments",
    "get_task_name_from_function",
    "get_task_name_from_interface",
    # Error handling
    "BatcherError",
    "NotFoundError",
    "TransportPreconditionError",
    # Database utilities
    "Database",
    "DatabaseConfiguration",
    "new_database",
    # Logging utilities
    "BatcherLogger",
    "ColorFormatter",
    "get_logger",
    "setup_logging",
    # Tokens
    "get_token",
    "hmac_base64",
    # URLs
    "build_url",
]
