"""
Tests for the repositories.

Checked invariants:
1. Records are validated before they reach the gateway
2. Every row read back is hydrated into a record
3. update() re-reads the stored record and returns None when the row is gone
4. Users are stored with a bcrypt hash; the hash only changes with a new plaintext
"""

import pytest

from core.errors import AppErrorException, ErrorCode
from core.validation import ValidationError, ValidationKind
from records import Item, User, Warehouse, WarehouseType


async def add_items(repo, *names):
    return [await repo.create(Item.new(name, f"About {name}", 10.0, "EUR")) for name in names]


# =============================================================================
# Items
# =============================================================================


class TestItemRepository:
    async def test_create_and_read(self, item_repo):
        new_id = await item_repo.create(Item.new("Desk lamp", "LED lamp", 19.995, "EUR"))
        item = await item_repo.read(new_id)
        assert item.id == new_id
        assert item.name == "Desk lamp"
        assert item.price == 20.0
        assert item.currency == "EUR"
        assert item.created_at is not None

    async def test_read_cleans_identifier(self, item_repo):
        [new_id] = await add_items(item_repo, "Lamp")
        assert (await item_repo.read("000" + new_id)).id == new_id
        assert (await item_repo.read(int(new_id))).id == new_id

    async def test_read_missing(self, item_repo):
        assert await item_repo.read("404") is None

    async def test_read_invalid_identifier(self, item_repo):
        with pytest.raises(ValidationError) as exc_info:
            await item_repo.read("abc")
        assert exc_info.value.kind is ValidationKind.EMPTY

    async def test_create_revalidates(self, item_repo):
        item = Item(name="  ", description="x", price=1.0)
        with pytest.raises(ValidationError):
            await item_repo.create(item)
        assert await item_repo.count() == 0

    async def test_index(self, item_repo):
        await add_items(item_repo, "B", "A")
        assert [i.name for i in await item_repo.index()] == ["B", "A"]

    async def test_update_via_with_name(self, item_repo):
        [new_id] = await add_items(item_repo, "Lamp")
        stored = await item_repo.read(new_id)
        updated = await item_repo.update(stored.with_name("Floor lamp"))
        assert updated.id == new_id
        assert updated.name == "Floor lamp"
        assert updated.price == stored.price
        assert updated.created_at == stored.created_at

    async def test_update_after_delete(self, item_repo):
        [new_id] = await add_items(item_repo, "Lamp")
        stored = await item_repo.read(new_id)
        assert await item_repo.delete(new_id)
        assert await item_repo.update(stored.with_name("Ghost")) is None

    async def test_update_without_identifier(self, item_repo):
        with pytest.raises(ValidationError) as exc_info:
            await item_repo.update(Item.new("Lamp", "x", 1.0))
        assert exc_info.value.field == "id"

    async def test_delete_missing(self, item_repo):
        assert await item_repo.delete("77") is False

    @pytest.mark.parametrize("id", ["9223372036854775808", "18446744073709551615"])
    async def test_identifier_beyond_signed_range_matches_nothing(self, item_repo, id):
        await add_items(item_repo, "Lamp")
        assert await item_repo.read(id) is None
        assert await item_repo.delete(id) is False
        assert await item_repo.count() == 1

    async def test_update_identifier_beyond_signed_range(self, item_repo):
        [new_id] = await add_items(item_repo, "Lamp")
        stored = await item_repo.read(new_id)
        ghost = Item.from_row({**stored.to_row(), "id": "18446744073709551615"})
        assert await item_repo.update(ghost.with_name("Ghost")) is None
        assert (await item_repo.read(new_id)).name == "Lamp"

    async def test_find_by_name(self, item_repo):
        await add_items(item_repo, "Red lamp", "Chair", "Blue lamp")
        assert [i.name for i in await item_repo.find_by_name("lamp")] == ["Red lamp", "Blue lamp"]

    @pytest.mark.parametrize("name", ["", "   ", None])
    async def test_blank_search(self, item_repo, name):
        with pytest.raises(ValidationError) as exc_info:
            await item_repo.search_by_name(name)
        assert exc_info.value.kind is ValidationKind.EMPTY

    async def test_search_by_name_pages_by_five(self, item_repo):
        await add_items(item_repo, *[f"Lamp {i}" for i in range(7)], "Chair")
        first = await item_repo.search_by_name("Lamp")
        assert len(first.records) == 5
        assert first.total == 7
        assert first.total_pages == 2
        assert first.has_next

        second = await item_repo.search_by_name("Lamp", page=2)
        assert [i.name for i in second.records] == ["Lamp 5", "Lamp 6"]
        assert not second.has_next
        assert await item_repo.count_by_name("Lamp") == 7

    async def test_paginate(self, item_repo):
        await add_items(item_repo, *[f"Item {i}" for i in range(25)])
        page = await item_repo.paginate()
        assert len(page.records) == 20
        assert page.total == 25
        last = await item_repo.paginate(page=3, per_page=10)
        assert [i.name for i in last.records] == [f"Item {i}" for i in range(20, 25)]

    async def test_paginate_rejects_bad_page(self, item_repo):
        with pytest.raises(ValidationError) as exc_info:
            await item_repo.paginate(page=0)
        assert exc_info.value.field == "page"

    async def test_malformed_stored_row_fails_hydration(self, item_repo, gateway):
        new_id = await gateway.insert("items", {"name": "Lamp", "description": "x", "price": 1.0})
        await gateway.update("items", new_id, {"name": "   "})
        stored = await item_repo.read(new_id)
        with pytest.raises(ValidationError):
            stored.validate()


# =============================================================================
# Users
# =============================================================================


class TestUserRepository:
    async def test_create_hashes_password(self, user_repo, gateway):
        new_id = await user_repo.create(User.new("Ada", "Ada@Example.com", "s3cret"))
        row = await gateway.select_one("users", new_id)
        assert row["email"] == "ada@example.com"
        assert row["password_hash"].startswith("$2")
        assert "s3cret" not in row.values()

        user = await user_repo.read(new_id)
        assert user.check_password("s3cret")
        assert not user.has_plain_password

    async def test_create_without_password(self, user_repo):
        new_id = await user_repo.create(User.new("Bob", "bob@example.com"))
        assert (await user_repo.read(new_id)).password_hash == ""

    async def test_duplicate_email(self, user_repo):
        await user_repo.create(User.new("Ada", "ada@example.com", "s3cret"))
        with pytest.raises(AppErrorException) as exc_info:
            await user_repo.create(User.new("Ada again", "ADA@example.com", "other"))
        assert exc_info.value.error.code is ErrorCode.E4011_DUPLICATE_KEY

    async def test_rename_keeps_hash(self, user_repo):
        new_id = await user_repo.create(User.new("Ada", "ada@example.com", "s3cret"))
        stored = await user_repo.read(new_id)
        updated = await user_repo.update(stored.with_name("Ada Lovelace"))
        assert updated.name == "Ada Lovelace"
        assert updated.password_hash == stored.password_hash
        assert updated.check_password("s3cret")

    async def test_new_password_replaces_hash(self, user_repo):
        new_id = await user_repo.create(User.new("Ada", "ada@example.com", "s3cret"))
        stored = await user_repo.read(new_id)
        old_hash = stored.password_hash
        stored.plain_password = "n3w-secret"
        updated = await user_repo.update(stored)
        assert updated.password_hash != old_hash
        assert updated.check_password("n3w-secret")
        assert not updated.check_password("s3cret")


# =============================================================================
# Warehouses
# =============================================================================


class TestWarehouseRepository:
    async def test_round_trip(self, warehouse_repo):
        new_id = await warehouse_repo.create(
            Warehouse.new("Main depot", WarehouseType.OWNED, address="1 Harbour Road", email="Depot@Example.com")
        )
        warehouse = await warehouse_repo.read(new_id)
        assert warehouse.type == "owned"
        assert warehouse.type_label == "Owned Warehouse"
        assert warehouse.email == "depot@example.com"
        assert warehouse.address == "1 Harbour Road"

    async def test_optional_contact_fields(self, warehouse_repo):
        new_id = await warehouse_repo.create(Warehouse.new("Express", "currier"))
        warehouse = await warehouse_repo.read(new_id)
        assert warehouse.address == ""
        assert warehouse.email == ""

    async def test_unknown_stored_type(self, warehouse_repo, gateway):
        new_id = await gateway.insert("warehouses", {"name": "Odd", "type": "spaceship"})
        warehouse = await warehouse_repo.read(new_id)
        assert warehouse.type == "spaceship"
        with pytest.raises(ValidationError) as exc_info:
            await warehouse_repo.update(warehouse.with_name("Odd site"))
        assert exc_info.value.kind is ValidationKind.INVALID_ENUM_VALUE

    async def test_search(self, warehouse_repo):
        await warehouse_repo.create(Warehouse.new("North depot", "owned"))
        await warehouse_repo.create(Warehouse.new("Paper Supplies", "supplier"))
        page = await warehouse_repo.search_by_name("depot")
        assert [w.name for w in page.records] == ["North depot"]
