"""Materials module - tabela efektów, szablony reguł i kompilator."""

from .rule_template import (
    RuleKind,
    MarkerKind,
    DynamicMarker,
    StaticRuleTemplate,
    ParameterizedRuleTemplate,
    RuleTemplate,
    ConcreteRule,
    parse_rule_template,
    is_module_owned,
    strip_module_rules,
    OWNED_FLAG,
)
from .parameters import DynamicParameter, load_parameters
from .effect_table import Grade, Category, EffectSpec, MaterialDefinition, EffectTable
from .rule_compiler import CompileContext, RuleCompiler, MARKER_RESOLVERS, format_label
from .registry import register_custom_materials, unregister_custom_materials

__all__ = [
    "RuleKind",
    "MarkerKind",
    "DynamicMarker",
    "StaticRuleTemplate",
    "ParameterizedRuleTemplate",
    "RuleTemplate",
    "ConcreteRule",
    "parse_rule_template",
    "is_module_owned",
    "strip_module_rules",
    "OWNED_FLAG",
    "DynamicParameter",
    "load_parameters",
    "Grade",
    "Category",
    "EffectSpec",
    "MaterialDefinition",
    "EffectTable",
    "CompileContext",
    "RuleCompiler",
    "MARKER_RESOLVERS",
    "format_label",
    "register_custom_materials",
    "unregister_custom_materials",
]
