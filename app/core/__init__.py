"""
Core Application - Infrastructure & Base Classes

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key
    - MetadataMixin: Flexible JSON metadata storage

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError, NotFoundError, ForbiddenError, ConflictError
    - StorageUnavailableError: Database unreachable

Responses (import from core.responses):
    - error_response: Render a failed ServiceResult with the right status

Helpers (import from core.helpers):
    - generate_token, digits_only, secrets_match, get_client_ip

Note:
    Models and model mixins are NOT imported here to avoid
    AppRegistryNotReady errors. Import them directly from their modules.
"""

from .exceptions import (
    BaseApplicationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from .helpers import digits_only, generate_token, get_client_ip, secrets_match
from .services import BaseService, ServiceResult

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "ValidationError",
    "NotFoundError",
    "ForbiddenError",
    "ConflictError",
    "StorageUnavailableError",
    # Helpers
    "generate_token",
    "digits_only",
    "secrets_match",
    "get_client_ip",
]
