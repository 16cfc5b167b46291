from records.enums import WarehouseType
from records.item import Item
from records.user import User
from records.warehouse import Warehouse

__all__ = [
    "Item",
    "User",
    "Warehouse",
    "WarehouseType",
]
