"""
Formulaires de configuration : description déclarative + état de soumission.

Les règles `states` (visible / required selon la valeur d'un autre champ)
sont évaluées côté client ; `StateCondition.matches()` permet d'évaluer la
même règle côté serveur.
"""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel

from .i18n import t


class StateCondition(BaseModel):
    field: str
    value: str

    def matches(self, values: Dict[str, Any]) -> bool:
        return values.get(self.field) == self.value


class FormField(BaseModel):
    name:          str
    type:          Literal["textarea", "textfield", "select"]
    title:         str
    description:   str = ""
    default_value: str = ""
    options:       Dict[str, str] = {}
    required:      bool = False
    attributes:    Dict[str, str] = {}
    field_suffix:  str = ""
    states:        Dict[Literal["visible", "required"], StateCondition] = {}

    def is_visible(self, values: Dict[str, Any]) -> bool:
        cond = self.states.get("visible")
        return cond is None or cond.matches(values)

    def is_required(self, values: Dict[str, Any]) -> bool:
        cond = self.states.get("required")
        return self.required or (cond is not None and cond.matches(values))


class FormAttachments(BaseModel):
    settings:  Dict[str, Any] = {}
    libraries: List[str] = []


class FormSpec(BaseModel):
    fields:   List[FormField] = []
    attached: FormAttachments = FormAttachments()

    def field(self, name: str) -> Optional[FormField]:
        return next((f for f in self.fields if f.name == name), None)


class FormState:
    """Valeurs soumises + erreurs, partagées entre validation et soumission."""

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self.values: Dict[str, Any] = dict(values or {})
        self.errors: Dict[str, str] = {}

    def get_value(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def set_value(self, name: str, value: Any):
        self.values[name] = value

    def set_error_by_name(self, name: str, message: str):
        self.errors.setdefault(name, message)

    def has_errors(self) -> bool:
        return bool(self.errors)


def validate_elements(form: FormSpec, state: FormState):
    """Contrôles génériques : champs requis, choix hors liste."""
    for f in form.fields:
        value = state.get_value(f.name)
        if f.required and (value is None or value == ""):
            state.set_error_by_name(f.name, t("@name field is required.", {"@name": f.title}))
            continue
        if f.type == "select" and value not in (None, "") and value not in f.options:
            state.set_error_by_name(
                f.name, t("An illegal choice has been detected. Please contact the site administrator.")
            )


def process_block_form(block, values: Dict[str, Any]) -> FormState:
    """
    Cycle complet : build → contrôles génériques → validate du bloc → submit.
    Le submit n'est appelé que si aucune erreur n'a été levée.
    """
    form = block.build_form()
    state = FormState({f.name: values.get(f.name, "") for f in form.fields})
    validate_elements(form, state)
    if not state.has_errors():
        block.validate_form(state)
    if not state.has_errors():
        block.on_submit(state)
    return state
