from models import ItemModel
from records import Item
from repositories.base import Repository


class ItemRepository(Repository[Item]):
    record_cls = Item
    model = ItemModel
