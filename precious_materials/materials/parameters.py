"""
Parametry dynamiczne - wartości wybierane przez użytkownika.

Obecnie jeden parametr: dragon_element (Dragonhide). Definicja w
defaults.yaml:

    dynamic_parameters:
      dragon_element:
        choices: [fire, cold, electricity, acid, poison]
        default: fire
        materials: [dragonhide]

Domyślna wartość to `default`, a gdy jej brak - pierwsza pozycja
z `choices`. Brak wyboru użytkownika nigdy nie blokuje kompilacji.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Tuple, Any, Optional


@dataclass(frozen=True)
class DynamicParameter:
    """
    Definicja parametru dynamicznego.

    Attributes:
        name: Nazwa parametru (także klucz flagi na itemie)
        choices: Dozwolone wartości
        default: Wartość domyślna
        materials: Materiały wymagające wyboru (prompt)
        prompt_title: Tytuł okna wyboru
        prompt_text: Treść okna wyboru
    """

    name: str
    choices: Tuple[str, ...]
    default: str
    materials: Tuple[str, ...] = ()
    prompt_title: str = ""
    prompt_text: str = ""

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "DynamicParameter":
        """Tworzy DynamicParameter z danych YAML."""
        choices = tuple(str(c) for c in data.get("choices", []))
        default = data.get("default") or (choices[0] if choices else "")
        prompt = data.get("prompt", {}) or {}
        return cls(
            name=name,
            choices=choices,
            default=str(default),
            materials=tuple(data.get("materials", [])),
            prompt_title=prompt.get("title", name),
            prompt_text=prompt.get("text", ""),
        )

    def is_valid(self, value: Optional[str]) -> bool:
        return value is not None and value in self.choices

    def applies_to(self, material: str) -> bool:
        """Czy materiał wymaga wyboru tego parametru."""
        return material in self.materials


def load_parameters(data: Dict[str, Dict]) -> Dict[str, DynamicParameter]:
    """Buduje mapę nazwa -> DynamicParameter z sekcji dynamic_parameters."""
    return {name: DynamicParameter.from_dict(name, entry or {}) for name, entry in data.items()}
