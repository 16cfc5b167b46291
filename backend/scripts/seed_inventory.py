#!/usr/bin/env python3
"""Seed items, users and warehouses from a YAML file.

Every entry is validated through its record's ``new`` constructor before it
is inserted; invalid entries are reported and skipped.

Run with: python3 -m scripts.seed_inventory --file ../data/seed/inventory.yaml
"""
import argparse
import asyncio
from pathlib import Path

import yaml

from bootstrap import Container, running
from core.config import get_settings
from core.errors import AppErrorException, user_message
from core.logging import bind_context, clear_context, generate_correlation_id, get_logger
from core.validation import ValidationError
from records import Item, User, Warehouse

log = get_logger("scripts.seed_inventory")

DEFAULT_SEED_FILE = Path(__file__).parent.parent.parent / "data" / "seed" / "inventory.yaml"


def load_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    with open(path) as f:
        return yaml.safe_load(f) or {}


async def seed_section(repository, entries: list[dict], build) -> tuple[int, int]:
    """Insert one section. Returns (created, skipped)."""
    created = skipped = 0
    for entry in entries:
        if not isinstance(entry, dict):
            skipped += 1
            log.warning("seed_entry_skipped", table=repository.table, entry=entry, reason="entry is not a mapping")
            continue
        try:
            record = build(entry)
            new_id = await repository.create(record)
        except (ValidationError, AppErrorException) as e:
            skipped += 1
            log.warning("seed_entry_skipped", table=repository.table, entry=entry, reason=user_message(e))
            continue
        created += 1
        log.info("seed_entry_created", table=repository.table, id=new_id)
    return created, skipped


async def seed(container: Container, data: dict) -> dict[str, tuple[int, int]]:
    sections = {
        "items": (container.items, lambda e: Item.new(
            name=e.get("name"),
            description=e.get("description"),
            price=e.get("price"),
            currency=e.get("currency"),
        )),
        "users": (container.users, lambda e: User.new(
            name=e.get("name"),
            email=e.get("email"),
            password=e.get("password"),
        )),
        "warehouses": (container.warehouses, lambda e: Warehouse.new(
            name=e.get("name"),
            type=e.get("type"),
            address=e.get("address"),
            email=e.get("email"),
        )),
    }

    report = {}
    for key, (repository, build) in sections.items():
        report[key] = await seed_section(repository, data.get(key) or [], build)
    return report


async def main(seed_file: Path, database_url: str | None = None):
    settings = get_settings()
    if database_url:
        settings = settings.model_copy(update={"DATABASE_URL": database_url})

    data = load_yaml(seed_file)
    if not data:
        print(f"No seed data found in {seed_file}")
        return

    bind_context(correlation_id=generate_correlation_id(), script="seed_inventory")
    try:
        async with running(settings) as container:
            report = await seed(container, data)
    finally:
        clear_context()

    for key, (created, skipped) in report.items():
        print(f"{key}: {created} created, {skipped} skipped")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the inventory tables from a YAML file")
    parser.add_argument("--file", "-f", type=Path, default=DEFAULT_SEED_FILE, help="Seed file (YAML)")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    args = parser.parse_args()
    asyncio.run(main(args.file, args.database_url))
