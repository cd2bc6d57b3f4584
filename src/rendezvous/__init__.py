"""Validated command orchestration with navigable paginated replies."""

import importlib.metadata
import logging

from rendezvous.config import FrozenConfig, ResolvedConfig, load_config, resolve_config
from rendezvous.core.exceptions import (
    ConfigurationError,
    InvalidRequestError,
    InvariantViolationError,
    MissingOptionError,
    PipelineError,
    RendezvousError,
    UnsupportedOptionKindError,
    ValidationError,
)
from rendezvous.core.outcome import (
    Failed,
    FailedDneDuo,
    FailedDneMono,
    FailedUnknown,
    FailedValidation,
    GenericOutcome,
    OutcomeBase,
    OutcomeStatus,
    Pagination,
    Succeeded,
    SucceededDuo,
    SucceededMono,
    SucceededNoChange,
    is_paginated,
)
from rendezvous.core.request import (
    LimitedChannel,
    LimitedMember,
    LimitedRequest,
    LimitedRole,
    LimitedUser,
    MessageRef,
    OptionKind,
    RequestOption,
    RequestOptions,
    limit_request,
)
from rendezvous.core.types import (
    CacheParams,
    CommandKind,
    DescribedOutcome,
    EmbedDescribedOutcome,
    Failure,
    PipelineRun,
    Presentation,
    ResponseRef,
    Result,
    Success,
)
from rendezvous.descriptions import DEFAULT_DESCRIPTIONS, describe_outcome
from rendezvous.interactions import (
    CachedInteraction,
    InMemoryInteractionCacheService,
    InteractionCacheService,
    NavigationDirection,
    NavigationEvent,
    OwnershipPolicy,
    PaginationNavigator,
    interaction_cacher,
)
from rendezvous.pipeline import RendezvousCommand
from rendezvous.telemetry import TelemetryContext, TelemetryReporter
from rendezvous.transport import Transport, simple_replyer
from rendezvous.validation import (
    ALWAYS,
    Constraint,
    ValidationCategory,
    check_constraints,
    validate_constraints,
    validation_failure,
)

try:
    __version__ = importlib.metadata.version("rendezvous")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Set up a null handler for the library's root logger.
# This prevents 'No handler found' errors if the consuming app has no logging configured.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Pipeline
    "RendezvousCommand",
    "PipelineRun",
    "CommandKind",
    "CacheParams",
    "Result",
    "Success",
    "Failure",
    # Outcomes
    "OutcomeBase",
    "OutcomeStatus",
    "GenericOutcome",
    "Pagination",
    "Succeeded",
    "SucceededMono",
    "SucceededDuo",
    "SucceededNoChange",
    "Failed",
    "FailedUnknown",
    "FailedValidation",
    "FailedDneMono",
    "FailedDneDuo",
    "is_paginated",
    # Requests
    "LimitedRequest",
    "LimitedMember",
    "LimitedUser",
    "LimitedChannel",
    "LimitedRole",
    "MessageRef",
    "OptionKind",
    "RequestOption",
    "RequestOptions",
    "limit_request",
    # Validation
    "ALWAYS",
    "Constraint",
    "ValidationCategory",
    "validate_constraints",
    "check_constraints",
    "validation_failure",
    # Descriptions and presentation
    "DEFAULT_DESCRIPTIONS",
    "describe_outcome",
    "DescribedOutcome",
    "EmbedDescribedOutcome",
    "Presentation",
    "ResponseRef",
    "Transport",
    "simple_replyer",
    # Interaction cache
    "CachedInteraction",
    "InteractionCacheService",
    "InMemoryInteractionCacheService",
    "interaction_cacher",
    "NavigationDirection",
    "NavigationEvent",
    "OwnershipPolicy",
    "PaginationNavigator",
    # Configuration and telemetry
    "FrozenConfig",
    "ResolvedConfig",
    "resolve_config",
    "load_config",
    "TelemetryContext",
    "TelemetryReporter",
    # Exceptions
    "RendezvousError",
    "ValidationError",
    "UnsupportedOptionKindError",
    "InvalidRequestError",
    "MissingOptionError",
    "PipelineError",
    "InvariantViolationError",
    "ConfigurationError",
]
