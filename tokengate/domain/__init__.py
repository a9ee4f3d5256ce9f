"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from tokengate.domain.enums import PipelineState, StatsRange, TokenStatus
from tokengate.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BackendAuthorizationException,
    BackendUnavailableException,
    ConstraintViolationException,
    DeliveryException,
    ResourceNotFoundException,
    TokenGateException,
    ValidationException,
)

__all__ = [
    "AuthenticationException",
    "AuthorizationException",
    "BackendAuthorizationException",
    "BackendUnavailableException",
    "ConstraintViolationException",
    "DeliveryException",
    "PipelineState",
    "ResourceNotFoundException",
    "StatsRange",
    "TokenGateException",
    "TokenStatus",
    "ValidationException",
]
