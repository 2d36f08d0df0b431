"""
Core Application - Infrastructure & Base Classes

This app contains infrastructure code shared by the domain apps:

- Generic, reusable base classes (no checkout-specific logic)
- Clear extension points for domain apps

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key

Services (import from core.services):
    - BaseService: Base class for service layer

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ExternalServiceError: Third-party service failures

Note:
    - Business logic should NOT go here. Extend core classes in your domain apps.
    - Django models and model mixins are NOT imported here to avoid AppRegistryNotReady
      errors. Import them directly from their modules.
"""

# Services (no Django model dependencies)
from .services import BaseService

# Exceptions (no Django dependencies)
from .exceptions import BaseApplicationError, ExternalServiceError

__all__ = [
    # Services
    "BaseService",
    # Exceptions
    "BaseApplicationError",
    "ExternalServiceError",
]
