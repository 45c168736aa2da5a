from shared.models.base import CamelModel
from shared.models.pagination import PaginatedResponse, PaginationParams
from shared.models.user import CurrentUser

__all__ = ["CamelModel", "CurrentUser", "PaginationParams", "PaginatedResponse"]
