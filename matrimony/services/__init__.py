from .biodata_query import BiodataFilters, BiodataQueryService, get_biodata_query_service
from .biodata_service import BiodataService, get_biodata_service
from .user_service import UserService, get_user_service

__all__ = [
    "BiodataFilters",
    "BiodataQueryService",
    "BiodataService",
    "UserService",
    "get_biodata_query_service",
    "get_biodata_service",
    "get_user_service",
]
