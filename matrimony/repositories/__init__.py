"""Repository layer to abstract MongoDB access patterns."""

from .biodata import BiodataRepository
from .counter import CounterRepository
from .favourite import FavouriteRepository
from .requests import PaymentRepository, PremiumRequestRepository
from .success_story import SuccessStoryRepository
from .user import UserRepository

__all__ = [
    "BiodataRepository",
    "CounterRepository",
    "FavouriteRepository",
    "PaymentRepository",
    "PremiumRequestRepository",
    "SuccessStoryRepository",
    "UserRepository",
]
