"""
LifecycleSynchronizer - utrzymuje reguły i akcje zgodne ze stanem itema.

HOOKI:
═══════════════════════════════════════════════════════════════════════════

    A. pre_commit(item, change)                      [synchronicznie]
    ─────────────────────────────────────────────────────────────
    Przed zapisem zmiany. Liczy docelowy stan (material, grade,
    parametry), zdejmuje reguły modułu i dopisuje nowo skompilowane.
    Wynik trafia do change.rules - host zapisuje go razem ze zmianą.

    B. post_commit(item, change, is_originator)      [async]
    ─────────────────────────────────────────────────────────────
    Po zapisie. Tylko sesja-autor:
        - PromptRequest gdy materiał wymaga parametru, którego brak
        - usunięcie akcji powiązanych z itemem
        - utworzenie akcji dla nowego stanu

    C. on_removed(item, actor_id, is_originator)     [async]
    ─────────────────────────────────────────────────────────────
    Item usunięty / zabrany z aktora - usunięcie powiązanych akcji.

    D. on_created(item, is_originator)               [async]
    ─────────────────────────────────────────────────────────────
    Item utworzony z materiałem - jak B, bez usuwania.

NIEZMIENNIKI:
═══════════════════════════════════════════════════════════════════════════

    - reguły modułu na itemie == compile_all(lookup(stan itema))
    - akcje z source_item_id == item.id == akcje z lookup(stan itema)
    - żadna akcja nie przeżywa swojego itema
    - brak efektów / nieznane klucze / brak parametru -> nic się nie dzieje
    - błędy hosta są logowane i propagowane
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Tuple, TYPE_CHECKING

from ..materials.effect_table import EffectTable, EffectSpec, Category
from ..materials.rule_compiler import RuleCompiler, CompileContext
from ..materials.rule_template import ConcreteRule, strip_module_rules, OWNED_FLAG
from ..materials.parameters import DynamicParameter
from ..actions.catalog import ActionCatalog, SubEntityDefinition
from ..items.classifier import classify
from ..items.compatibility import CompatibilityChecker, CompatibilityWarning, ItemShapeHints
from ..host.models import HostItem, ItemChange, SubEntityRecord

if TYPE_CHECKING:
    from ..host.store import HostStore
    from ..events.event_logger import EventLogger


# ═══════════════════════════════════════════════════════════════════════════
# WYNIKI
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PromptRequest:
    """
    Prośba do hosta o wybór wartości parametru.

    Host wyświetla okno i odpowiada przez resolve_prompt() - wynik
    wraca do silnika zwykłą ścieżką pre/post-commit.
    """

    item_id: str
    item_name: str
    parameter: str
    choices: Tuple[str, ...]
    default: str
    title: str = ""
    text: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "item_name": self.item_name,
            "parameter": self.parameter,
            "choices": list(self.choices),
            "default": self.default,
            "title": self.title,
            "text": self.text,
        }


@dataclass
class SyncReport:
    """
    Wynik jednego hooka.

    Attributes:
        item_id: ID itema
        hook: Nazwa hooka (pre_commit, post_commit, created, removed, purge)
        category: Kategoria itema (None = item nieobsługiwany)
        rules: Lista reguł zapisana w change (tylko pre_commit)
        created: Utworzone akcje
        deleted: ID usuniętych akcji
        prompts: Prośby o wybór parametru
        warnings: Ostrzeżenia kompatybilności
        skipped: Sesja nie jest autorem zmiany
    """

    item_id: Optional[str]
    hook: str
    category: Optional[str] = None
    rules: Optional[List[Dict[str, Any]]] = None
    created: List[SubEntityRecord] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    prompts: List[PromptRequest] = field(default_factory=list)
    warnings: List[CompatibilityWarning] = field(default_factory=list)
    skipped: bool = False


@dataclass
class EffectPlan:
    """
    Efekty dla stanu (material, grade, category, parametry).

    Wynik plan() - używany przez pre_commit i podgląd (preview).
    """

    material: str
    grade: str
    category: Optional[str]
    spec: Optional[EffectSpec] = None
    rules: List[ConcreteRule] = field(default_factory=list)
    actions: List[SubEntityDefinition] = field(default_factory=list)
    warnings: List[CompatibilityWarning] = field(default_factory=list)
    parameters: Dict[str, str] = field(default_factory=dict)

    @property
    def has_effects(self) -> bool:
        return self.spec is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "material": self.material,
            "grade": self.grade,
            "category": self.category,
            "has_effects": self.has_effects,
            "parameters": dict(self.parameters),
            "rules": [r.to_dict() for r in self.rules],
            "actions": [dict(d.to_payload(), key=d.key) for d in self.actions],
            "notes": list(self.spec.notes) if self.spec else [],
            "warnings": [
                {"code": w.code, "message": w.message} for w in self.warnings
            ],
        }


# ═══════════════════════════════════════════════════════════════════════════
# SYNCHRONIZER
# ═══════════════════════════════════════════════════════════════════════════

class LifecycleSynchronizer:
    """
    Synchronizuje reguły itema i akcje aktora ze stanem materiału.

    Usage:
        sync = LifecycleSynchronizer(store, table, compiler, catalog, checker,
                                     parameters, module_id, logger)
        report = sync.pre_commit(item, change)       # change.rules ustawione
        ...host zapisuje zmianę...
        report = await sync.post_commit(item, change, is_originator=True)
    """

    def __init__(
        self,
        store: "HostStore",
        table: EffectTable,
        compiler: RuleCompiler,
        catalog: ActionCatalog,
        checker: CompatibilityChecker,
        parameters: Dict[str, DynamicParameter],
        module_id: str,
        logger: "EventLogger",
    ):
        self.store = store
        self.table = table
        self.compiler = compiler
        self.catalog = catalog
        self.checker = checker
        self.parameters = parameters
        self.module_id = module_id
        self.logger = logger

    # ─────────────────────────────────────────────────────────────────────────
    # PLAN
    # ─────────────────────────────────────────────────────────────────────────

    def plan(
        self,
        material: str,
        grade: str,
        category: Optional[Category],
        parameters: Optional[Dict[str, Any]] = None,
        hints: Optional[ItemShapeHints] = None,
        item_id: Optional[str] = None,
    ) -> EffectPlan:
        """
        Liczy efekty dla stanu bez zapisywania czegokolwiek.

        Ostrzeżenia kompatybilności są zwracane, nie logowane.
        """
        parameters = dict(parameters or {})
        plan = EffectPlan(
            material=material,
            grade=grade,
            category=category.value if category else None,
            parameters=parameters,
        )
        if category is None or not material or not grade:
            return plan

        spec = self.table.lookup(material, grade, category)
        if spec is None:
            return plan

        context = CompileContext(material, grade, category.value, parameters, item_id)
        plan.spec = spec
        plan.warnings = self.checker.check(material, category, hints or ItemShapeHints())
        plan.rules = self.compiler.compile_all(spec, context)
        plan.actions = [
            self.catalog.get(key) for key in spec.action_keys if key in self.catalog
        ]
        return plan

    # ─────────────────────────────────────────────────────────────────────────
    # PARAMETRY
    # ─────────────────────────────────────────────────────────────────────────

    def stored_parameters(self, item: HostItem) -> Dict[str, Any]:
        """Parametry zapisane na itemie (flagi modułu)."""
        result = {}
        for name in self.parameters:
            value = item.get_flag(self.module_id, name)
            if value not in (None, ""):
                result[name] = value
        return result

    def effective_parameters(self, item: HostItem, change: ItemChange) -> Dict[str, Any]:
        """
        Parametry po zmianie.

        Wartość ze zmiany ma pierwszeństwo przed zapisaną, "" czyści parametr.
        """
        result = self.stored_parameters(item)
        for name, value in change.parameters.items():
            if value in (None, ""):
                result.pop(name, None)
            else:
                result[name] = value
        return result

    def required_prompts(self, item: HostItem) -> List[PromptRequest]:
        """Prośby o parametry wymagane przez materiał itema, których brak."""
        stored = self.stored_parameters(item)
        prompts = []
        for name, param in self.parameters.items():
            if not param.applies_to(item.material_type) or name in stored:
                continue
            prompts.append(PromptRequest(
                item_id=item.id,
                item_name=item.name,
                parameter=name,
                choices=param.choices,
                default=param.default,
                title=param.prompt_title,
                text=param.prompt_text,
            ))
            self.logger.log_prompt_requested(item.id, name)
        return prompts

    def resolve_prompt(self, request: PromptRequest, choice: Optional[str] = None) -> ItemChange:
        """
        Zamienia odpowiedź na prompt w zmianę itema.

        Anulowanie (None) lub wartość spoza listy -> default parametru.
        """
        param = self.parameters.get(request.parameter)
        default = param.default if param else request.default

        if choice is None:
            value = default
        elif param is not None and not param.is_valid(choice):
            self.logger.log_invalid_parameter(request.item_id, request.parameter, choice)
            value = default
        else:
            value = choice

        self.logger.log_parameter_chosen(request.item_id, request.parameter, value)
        return ItemChange(parameters={request.parameter: value})

    # ─────────────────────────────────────────────────────────────────────────
    # A. PRE-COMMIT
    # ─────────────────────────────────────────────────────────────────────────

    def pre_commit(self, item: HostItem, change: ItemChange) -> SyncReport:
        """
        Przepisuje reguły modułu w proponowanej zmianie.

        Wynik zapisywany w change.rules. Nie robi nic, gdy item nie ma
        obsługiwanej kategorii albo zmiana nie dotyka materiału ani parametrów.
        """
        report = SyncReport(item_id=item.id, hook="pre_commit")

        category = classify(item.item_type, item.subtype)
        if category is None:
            return report
        report.category = category.value

        if not change.touches_material and not change.touches_parameters:
            return report

        material = change.material_type if change.material_type is not None else item.material_type
        grade = change.material_grade if change.material_grade is not None else item.material_grade

        base = change.rules if change.rules is not None else item.rules
        stripped = strip_module_rules(base, self.module_id)

        if not material or not grade:
            change.rules = stripped
            report.rules = stripped
            self.logger.log_rules_cleared(item.id)
            return report

        plan = self.plan(
            material,
            grade,
            category,
            self.effective_parameters(item, change),
            item.shape_hints,
            item.id,
        )

        if not plan.has_effects:
            change.rules = stripped
            report.rules = stripped
            self.logger.log_no_effects(item.id, material, grade, category.value)
            return report

        for warning in plan.warnings:
            self.logger.log_compatibility_warning(item.id, warning.code, warning.message)
        report.warnings = plan.warnings

        compiled = [r.to_dict() for r in plan.rules]
        change.rules = stripped + compiled
        report.rules = change.rules
        self.logger.log_rules_injected(item.id, material, grade, category.value, len(compiled))
        return report

    # ─────────────────────────────────────────────────────────────────────────
    # B. POST-COMMIT
    # ─────────────────────────────────────────────────────────────────────────

    async def post_commit(
        self,
        item: HostItem,
        change: ItemChange,
        is_originator: bool,
    ) -> SyncReport:
        """
        Odtwarza akcje itema po zapisanej zmianie.

        Args:
            item: Item w stanie PO zmianie
            change: Zapisana zmiana
            is_originator: Czy ta sesja wykonała zmianę
        """
        report = SyncReport(item_id=item.id, hook="post_commit")

        if not change.touches_material and not change.touches_parameters:
            return report

        if not is_originator:
            report.skipped = True
            self.logger.log_skipped(item.id, report.hook)
            return report

        category = classify(item.item_type, item.subtype)
        if category is None:
            return report
        report.category = category.value

        if change.touches_material:
            report.prompts = self.required_prompts(item)

        if item.actor_id is None:
            return report

        report.deleted = await self.remove_actions_for_item(item.actor_id, item.id)

        if not item.has_material:
            return report

        spec = self.table.lookup(item.material_type, item.material_grade, category)
        if spec is None or not spec.has_actions:
            return report

        report.created = await self.create_actions_for_item(item, spec)
        return report

    # ─────────────────────────────────────────────────────────────────────────
    # C. USUNIĘCIE / D. UTWORZENIE
    # ─────────────────────────────────────────────────────────────────────────

    async def on_removed(
        self,
        item: HostItem,
        actor_id: Optional[str],
        is_originator: bool,
    ) -> SyncReport:
        """
        Usuwa akcje powiązane z itemem.

        Nie sprawdza kategorii - akcje są usuwane po source_item_id.
        """
        report = SyncReport(item_id=item.id, hook="removed")

        if not is_originator:
            report.skipped = True
            self.logger.log_skipped(item.id, report.hook)
            return report

        actor_id = actor_id or item.actor_id
        if actor_id is None:
            return report

        report.deleted = await self.remove_actions_for_item(actor_id, item.id)
        return report

    async def on_created(self, item: HostItem, is_originator: bool) -> SyncReport:
        """
        Tworzy akcje dla itema utworzonego z ustawionym materiałem.

        Tylko akcje - reguł modułu na itemie nie dopisuje. Pojawiają się
        przy pierwszym pre_commit zmieniającym materiał, poziom lub parametr.
        """
        report = SyncReport(item_id=item.id, hook="created")

        if not is_originator:
            report.skipped = True
            self.logger.log_skipped(item.id, report.hook)
            return report

        category = classify(item.item_type, item.subtype)
        if category is None or not item.has_material:
            return report
        report.category = category.value

        report.prompts = self.required_prompts(item)

        if item.actor_id is None:
            return report

        spec = self.table.lookup(item.material_type, item.material_grade, category)
        if spec is None or not spec.has_actions:
            return report

        report.created = await self.create_actions_for_item(item, spec)
        return report

    async def purge_actor(self, actor_id: str, is_originator: bool) -> SyncReport:
        """Usuwa z aktora wszystkie akcje utworzone przez moduł."""
        report = SyncReport(item_id=None, hook="purge")

        if not is_originator:
            report.skipped = True
            return report

        ids = [
            record.id
            for record in self.store.get_sub_entities(actor_id)
            if record.is_owned_by(self.module_id)
        ]
        report.deleted = await self._delete(actor_id, ids, None)
        return report

    # ─────────────────────────────────────────────────────────────────────────
    # OPERACJE NA AKCJACH
    # ─────────────────────────────────────────────────────────────────────────

    async def remove_actions_for_item(self, actor_id: str, item_id: str) -> List[str]:
        """Usuwa wszystkie akcje aktora z source_item_id == item_id."""
        ids = [
            record.id
            for record in self.store.get_sub_entities(actor_id)
            if record.is_linked_to(self.module_id, item_id)
        ]
        return await self._delete(actor_id, ids, item_id)

    async def create_actions_for_item(
        self,
        item: HostItem,
        spec: EffectSpec,
    ) -> List[SubEntityRecord]:
        """Tworzy akcje z katalogu (jedna operacja wsadowa)."""
        definitions = self.catalog.resolve_all(spec.action_keys, item.id)
        if not definitions:
            return []

        payloads = [self._stamp(d, item.id, spec) for d in definitions]
        try:
            created = await self.store.create_sub_entities(item.actor_id, payloads)
        except Exception as e:
            self.logger.log_store_failure("create", item.actor_id, str(e), item.id)
            raise

        self.logger.log_actions_created(
            item.id,
            item.actor_id,
            [r.id for r in created],
            [d.key for d in definitions],
        )
        return created

    async def _delete(
        self,
        actor_id: str,
        ids: List[str],
        item_id: Optional[str],
    ) -> List[str]:
        if not ids:
            return []
        try:
            deleted = await self.store.delete_sub_entities(actor_id, ids)
        except Exception as e:
            self.logger.log_store_failure("delete", actor_id, str(e), item_id)
            raise
        self.logger.log_actions_removed(item_id, actor_id, list(deleted))
        return list(deleted)

    def _stamp(
        self,
        definition: SubEntityDefinition,
        item_id: str,
        spec: EffectSpec,
    ) -> Dict[str, Any]:
        """Dane akcji + flagi powiązania z itemem źródłowym."""
        payload = definition.to_payload()
        payload["flags"] = {
            self.module_id: {
                OWNED_FLAG: True,
                "source_item_id": item_id,
                "action_key": definition.key,
                "material_slug": spec.material,
                "grade": spec.grade,
                "category": spec.category,
            }
        }
        return payload
