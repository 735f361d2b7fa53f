"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps. Nothing in here knows
about chats or members.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Helpers (import from core.helpers):
    - parse_uuid: Lenient UUID parsing

Views (import from core.views):
    - health_check: Liveness/readiness endpoint

Usage:
    from core.models import BaseModel
    from core.model_mixins import UUIDPrimaryKeyMixin
    from core.services import BaseService, ServiceResult

    class Document(UUIDPrimaryKeyMixin, BaseModel):
        name = models.CharField(max_length=100)

    class DocumentService(BaseService):
        @classmethod
        def rename(cls, document, name) -> ServiceResult[Document]:
            if not name:
                return ServiceResult.failure("Name is required", "NAME_REQUIRED")
            ...
"""
