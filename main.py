#!/usr/bin/env python3
"""
Precious Materials Engine - Entry Point
═══════════════════════════════════════════════════════════════════════════

Uruchamia scenariusz demonstracyjny na hoście w pamięci: tworzy aktora
z itemem, nakłada materiał, pokazuje reguły i akcje, a na końcu zdejmuje
materiał.

Użycie:
    python main.py                                          # Sovereign Steel High Shield
    python main.py --material dragonhide --grade standard --type armor --element cold
    python main.py --verbose                                # Statystyki zdarzeń
    python main.py --save output/events.json                # Zapis logu

Wynik:
    - Wypisuje reguły i akcje na konsolę
    - Opcjonalnie zapisuje log zdarzeń do JSON
"""

import argparse
import asyncio
import sys

from precious_materials import PreciousMaterialsEngine, InMemoryHostStore, HostItem, ItemChange
from precious_materials.core.config_loader import ConfigLoader
from precious_materials.events.event_logger import EventType


def print_state(store: InMemoryHostStore, item: HostItem, actor_id: str) -> None:
    """Wypisuje reguły itema i akcje aktora."""
    current = store.get_item(item.id)
    print(f"Reguły ({len(current.rules)}):")
    for rule in current.rules:
        label = rule.get("label") or rule.get("text", "")
        print(f"  - [{rule['key']}] {label}")

    actions = store.get_sub_entities(actor_id)
    print(f"Akcje ({len(actions)}):")
    for record in actions:
        print(f"  - {record.name}")


async def run_demo(args) -> PreciousMaterialsEngine:
    loader = ConfigLoader(args.data)
    store = InMemoryHostStore(loader.get_module_id())
    engine = PreciousMaterialsEngine(store, loader=loader)
    engine.initialize(store.material_labels)
    store.connect("gm", engine)

    actor = store.create_actor("Demo Hero")
    item = HostItem(
        id="demo-item",
        name=f"Demo {args.type}",
        item_type=args.type,
        subtype=args.subtype,
        actor_id=actor.id,
    )
    await store.create_item(item, session_id="gm")

    # ─────────────────────────────────────────────────────────────────────────
    # NAŁOŻENIE MATERIAŁU
    # ─────────────────────────────────────────────────────────────────────────
    print(f"Materiał: {args.material} ({args.grade})")
    print("-" * 60)

    transaction = await store.update_item(
        item.id,
        ItemChange(material_type=args.material, material_grade=args.grade),
        session_id="gm",
    )
    for warning in transaction.pre_commit.warnings:
        print(f"⚠️  {warning.message}")

    # Odpowiedź na prompt (np. wybór żywiołu)
    for request in list(store.prompt_queue):
        print(f"❓ {request.title}: {', '.join(request.choices)} -> {args.element or request.default}")
        await store.answer_prompt(request, args.element, session_id="gm")

    print_state(store, item, actor.id)

    # ─────────────────────────────────────────────────────────────────────────
    # USUNIĘCIE MATERIAŁU
    # ─────────────────────────────────────────────────────────────────────────
    print()
    print("Usunięcie materiału")
    print("-" * 60)
    await store.update_item(
        item.id,
        ItemChange(material_type="", material_grade=""),
        session_id="gm",
    )
    print_state(store, item, actor.id)

    engine.shutdown()
    return engine


def main():
    """Główna funkcja."""
    parser = argparse.ArgumentParser(
        description="Precious Materials Engine demo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--material", default="sovereign-steel", help="Slug materiału")
    parser.add_argument("--grade", default="high", choices=["low", "standard", "high"], help="Poziom")
    parser.add_argument("--type", default="shield", help="Typ itema (weapon/armor/shield)")
    parser.add_argument("--subtype", default=None, help="Podkategoria (np. shield dla armor)")
    parser.add_argument("--element", default=None, help="Odpowiedź na prompt parametru")
    parser.add_argument("--data", default=None, help="Folder z plikami YAML")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Statystyki zdarzeń"
    )
    parser.add_argument("--save", default=None, help="Zapisz log zdarzeń do pliku JSON")

    args = parser.parse_args()

    print("=" * 60)
    print("PRECIOUS MATERIALS ENGINE")
    print("=" * 60)

    engine = asyncio.run(run_demo(args))

    if args.save:
        engine.logger.save(args.save)
        print()
        print(f"📄 Log zapisany: {args.save}")

    if args.verbose:
        print()
        print("-" * 60)
        print("STATYSTYKI ZDARZEŃ")
        print("-" * 60)

        for event_type in EventType:
            count = len(engine.logger.get_events_by_type(event_type))
            if count > 0:
                print(f"  {event_type.name}: {count}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
