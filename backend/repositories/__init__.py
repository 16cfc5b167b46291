from repositories.base import Repository
from repositories.item import ItemRepository
from repositories.user import UserRepository
from repositories.warehouse import WarehouseRepository

__all__ = [
    "Repository",
    "ItemRepository",
    "UserRepository",
    "WarehouseRepository",
]
