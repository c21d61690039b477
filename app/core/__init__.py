"""
Core Application - Infrastructure & Base Classes

Generic base classes shared by the marketplace and payments apps.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key
    - VersionedMixin: Optimistic locking version counter

Services (import from core.services):
    - BaseService: Base class for service layer

Exceptions (import from core.exceptions):
    - BaseApplicationError and its HTTP-mapped subclasses

Exception handling (core.exception_handler):
    - api_exception_handler: DRF EXCEPTION_HANDLER

Views (import from core.views):
    - health_check: Health check endpoint
"""
