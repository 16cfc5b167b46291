from models.item import ItemModel
from models.user import UserModel
from models.warehouse import WarehouseModel

__all__ = [
    "ItemModel",
    "UserModel",
    "WarehouseModel",
]
