from models import WarehouseModel
from records import Warehouse
from repositories.base import Repository


class WarehouseRepository(Repository[Warehouse]):
    record_cls = Warehouse
    model = WarehouseModel
