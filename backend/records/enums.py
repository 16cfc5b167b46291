from enum import Enum


class WarehouseType(str, Enum):
    """Who operates a warehouse. Values match the ``warehouses.type`` column."""
    OWNED = "owned"
    SUPPLIER = "supplier"
    CURRIER = "currier"

    @property
    def label(self) -> str:
        """Human-readable label for listings and select boxes."""
        return _LABELS[self]


_LABELS = {
    WarehouseType.OWNED: "Owned Warehouse",
    WarehouseType.SUPPLIER: "Supplier Warehouse",
    WarehouseType.CURRIER: "Courier Warehouse",
}
