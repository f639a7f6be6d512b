"""
batcher - resumable multi-request batch processing

Runs long lists of operations in time-boxed steps so they complete even
when a single request may only run for a short time:
- Batch sets with progress messages and finished callbacks
- Claim/delete work queues in PostgreSQL or in memory
- Checkpoints between polling requests
- Percentage and time estimates for the polling client
- Cleanup of abandoned batches
"""

from ._version import __version__

# Core exports
from .batcher import (
    Batcher,
    new_batcher,
    new_batcher_with_db,
)

from .batcher_global import (
    DEFAULT_TIME_BUDGET,
)

from .helper.database import (
    DatabaseConfiguration,
)

from .model.operation import (
    Operation,
    new_operation,
)

from .model.batch import (
    Batch,
    EngineState,
)

from .model.batch_set import (
    BatchSet,
)

from .model.context import (
    OperationContext,
    OperationResult,
)

from .model.report import (
    BatchReport,
    Progress,
    ProgressPage,
    Redirect,
    SetReport,
)

from .model.cleanup import (
    CleanupSettings,
)

from .helper.error import (
    BatcherError,
    NotFoundError,
    TransportPreconditionError,
)

# Import submodules for direct access
from . import core
from . import database
from . import helper
from . import model

# Convenience imports for common use cases
__all__ = [
    # Core classes
    "Batcher",
    "new_batcher",
    "new_batcher_with_db",
    "DEFAULT_TIME_BUDGET",
    # Configuration
    "DatabaseConfiguration",
    "CleanupSettings",
    # Models
    "Operation",
    "new_operation",
    "Batch",
    "EngineState",
    "BatchSet",
    "OperationContext",
    "OperationResult",
    "BatchReport",
    "Progress",
    "ProgressPage",
    "Redirect",
    "SetReport",
    # Exceptions
    "BatcherError",
    "NotFoundError",
    "TransportPreconditionError",
    # Submodules
    "core",
    "database",
    "helper",
    "model",
    # Version info
    "__version__",
]
