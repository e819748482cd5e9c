"""
PreciousMaterialsEngine - główny punkt wejścia silnika materiałów.

Składa wszystkie komponenty z danych YAML:

    ConfigLoader ──► EffectTable ─────────┐
                 ├─► ActionCatalog ───────┤
                 ├─► DynamicParameter ────┼──► LifecycleSynchronizer
                 ├─► RuleCompiler ────────┤
                 └─► CompatibilityChecker ┘

Cykl życia:
    engine = PreciousMaterialsEngine(store)
    engine.initialize(store.material_labels)   # rejestracja materiałów własnych
    ...hooki...
    engine.shutdown()                          # zdejmuje tylko dodane materiały

Silnik jest listenerem sesji dla InMemoryHostStore (pre_commit,
post_commit, on_created, on_removed, resolve_prompt).
"""

from __future__ import annotations
from typing import Dict, List, Optional, Any, MutableMapping

from .core.config_loader import ConfigLoader
from .events.event_logger import EventLogger
from .materials.effect_table import EffectTable, Category
from .materials.parameters import DynamicParameter, load_parameters
from .materials.rule_compiler import RuleCompiler
from .materials.registry import register_custom_materials, unregister_custom_materials
from .actions.catalog import ActionCatalog
from .items.classifier import classify
from .items.compatibility import CompatibilityChecker, ItemShapeHints
from .host.models import HostItem, ItemChange
from .host.store import HostStore
from .sync.synchronizer import LifecycleSynchronizer, SyncReport, PromptRequest, EffectPlan


class PreciousMaterialsEngine:
    """
    Fasada silnika - wstrzykuje zależności i deleguje hooki.

    Attributes:
        store: Magazyn hosta
        loader: Loader danych YAML
        logger: Logger zdarzeń
        table: Tabela efektów
        catalog: Katalog akcji
        synchronizer: Synchronizator cyklu życia
    """

    def __init__(
        self,
        store: HostStore,
        loader: Optional[ConfigLoader] = None,
        table: Optional[EffectTable] = None,
        catalog: Optional[ActionCatalog] = None,
        custom_materials: Optional[Dict[str, str]] = None,
        logger: Optional[EventLogger] = None,
    ):
        self.store = store
        self.loader = loader or ConfigLoader()
        self.module_id = self.loader.get_module_id()
        self.logger = logger or EventLogger(
            module_id=self.module_id,
            max_events=self.loader.get_max_events(),
        )

        self.parameters: Dict[str, DynamicParameter] = load_parameters(
            self.loader.get_dynamic_parameters()
        )
        self.table = table if table is not None else EffectTable.from_loader(self.loader)
        self.catalog = (
            catalog if catalog is not None
            else ActionCatalog.from_loader(self.loader, logger=self.logger)
        )
        self.custom_materials = (
            dict(custom_materials) if custom_materials is not None
            else self.loader.get_custom_materials()
        )

        self.compiler = RuleCompiler(
            module_id=self.module_id,
            label_prefix=self.loader.get_label_prefix(),
            parameters=self.parameters,
            logger=self.logger,
        )
        self.checker = CompatibilityChecker.from_list(self.loader.get_compatibility_rules())

        self.synchronizer = LifecycleSynchronizer(
            store=self.store,
            table=self.table,
            compiler=self.compiler,
            catalog=self.catalog,
            checker=self.checker,
            parameters=self.parameters,
            module_id=self.module_id,
            logger=self.logger,
        )

        self._display_registry: Optional[MutableMapping[str, str]] = None
        self._registered: List[str] = []
        self.initialized = False

    # ─────────────────────────────────────────────────────────────────────────
    # CYKL ŻYCIA
    # ─────────────────────────────────────────────────────────────────────────

    def initialize(self, display_registry: Optional[MutableMapping[str, str]] = None) -> List[str]:
        """
        Rejestruje materiały własne w dropdownie hosta.

        Returns:
            Slugi dodane przez silnik (istniejące wpisy są pomijane)
        """
        if self.initialized:
            return list(self._registered)

        if display_registry is not None:
            self._display_registry = display_registry
            self._registered = register_custom_materials(
                display_registry, self.custom_materials, self.logger
            )

        self.initialized = True
        self.logger.log_engine_init(len(self.table))
        return list(self._registered)

    def shutdown(self) -> None:
        """Zdejmuje materiały dodane przez initialize()."""
        if not self.initialized:
            return
        if self._display_registry is not None:
            unregister_custom_materials(self._display_registry, self._registered, self.logger)
        self._registered = []
        self._display_registry = None
        self.initialized = False
        self.logger.log_engine_shutdown()

    @property
    def registered_materials(self) -> List[str]:
        return list(self._registered)

    # ─────────────────────────────────────────────────────────────────────────
    # HOOKI
    # ─────────────────────────────────────────────────────────────────────────

    def pre_commit(self, item: HostItem, change: ItemChange) -> SyncReport:
        return self.synchronizer.pre_commit(item, change)

    async def post_commit(self, item: HostItem, change: ItemChange, is_originator: bool) -> SyncReport:
        return await self.synchronizer.post_commit(item, change, is_originator)

    async def on_created(self, item: HostItem, is_originator: bool) -> SyncReport:
        return await self.synchronizer.on_created(item, is_originator)

    async def on_removed(
        self,
        item: HostItem,
        actor_id: Optional[str],
        is_originator: bool,
    ) -> SyncReport:
        return await self.synchronizer.on_removed(item, actor_id, is_originator)

    async def purge_actor(self, actor_id: str, is_originator: bool = True) -> SyncReport:
        return await self.synchronizer.purge_actor(actor_id, is_originator)

    def resolve_prompt(self, request: PromptRequest, choice: Optional[str] = None) -> ItemChange:
        return self.synchronizer.resolve_prompt(request, choice)

    # ─────────────────────────────────────────────────────────────────────────
    # PODGLĄD
    # ─────────────────────────────────────────────────────────────────────────

    def preview(
        self,
        item_type: str,
        material: str,
        grade: str,
        subtype: Optional[str] = None,
        parameters: Optional[Dict[str, Any]] = None,
        hints: Optional[ItemShapeHints] = None,
    ) -> EffectPlan:
        """
        Liczy efekty dla opisu itema bez dotykania hosta.

        Args:
            item_type: Typ itema (weapon / armor / shield)
            material: Slug materiału
            grade: Poziom
            subtype: Podkategoria (np. "shield" dla armor)
            parameters: Wartości parametrów dynamicznych
            hints: Podpowiedzi kształtu (ostrzeżenia kompatybilności)
        """
        category = classify(item_type, subtype)
        return self.synchronizer.plan(material, grade, category, parameters, hints)

    def material_names(self) -> Dict[str, str]:
        """Zwraca slug -> nazwa wyświetlana dla wszystkich materiałów tabeli."""
        return {
            slug: self.table.get_material(slug).name
            for slug in self.table.materials()
        }

    def categories(self) -> List[str]:
        return [c.value for c in Category]
