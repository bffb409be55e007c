"""Normalization of raw extraction output.

The extraction capability is asked for a JSON object with the declared keys,
but nothing guarantees it delivers one. ``normalize_placeholders`` coerces any
JSON-decodable value into a well-formed ``ExtractedPlaceholders`` and never
raises.
"""

from typing import Any

from prompt_assembler.strategies.template_engine.models import (
    ExtractedPlaceholders,
    InputDefinition,
    InputVariable,
)

_SCALAR_FIELDS = ("artifact_name", "defined_scope", "definition", "criteria_guidance")
_LIST_FIELDS = ("hard_boundary_may_not", "examples", "checklist")


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_text_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    items: list[str] = []
    for item in value:
        if isinstance(item, str):
            items.append(item)
        elif isinstance(item, (int, float)) and not isinstance(item, bool):
            try:
                items.append(str(item))
            except ValueError:
                # int too large for str() conversion
                continue
    return items


def _named(item: Any) -> tuple[str, str, dict] | None:
    """Return (name, label, fields) for an object or bare-string entry, else None."""
    if isinstance(item, str):
        return item, "", {}
    if not isinstance(item, dict):
        return None
    return _as_text(item.get("name")), _as_text(item.get("label")), item


def _normalize_inputs(raw: dict) -> list[InputVariable]:
    source = raw.get("inputs")
    if source is None:
        source = raw.get("input_variables")
    if source is None and isinstance(raw.get("input_variables_list"), list):
        return _inputs_from_variables_list(raw["input_variables_list"])
    if not isinstance(source, list):
        return []

    inputs: list[InputVariable] = []
    for item in source:
        entry = _named(item)
        if entry is None:
            continue
        name, label, fields = entry
        variable = InputVariable.from_name(name, use=_as_text(fields.get("use")))
        if label:
            variable = variable.model_copy(update={"label": label})
        inputs.append(variable)
    return inputs


def _inputs_from_variables_list(entries: list) -> list[InputVariable]:
    """Fold legacy ``{title_case_name, bracketed_snake_case_name}`` rows into inputs."""
    inputs: list[InputVariable] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        bracketed = _as_text(entry.get("bracketed_snake_case_name")).strip().strip("{}[] ")
        title = _as_text(entry.get("title_case_name"))
        if bracketed:
            variable = InputVariable.from_name(bracketed)
            if title and title != variable.display_name:
                variable = variable.model_copy(update={"label": title})
        elif title:
            variable = InputVariable.from_name(title)
        else:
            continue
        inputs.append(variable)
    return inputs


def _normalize_definitions(value: Any) -> list[InputDefinition]:
    if not isinstance(value, list):
        return []
    definitions: list[InputDefinition] = []
    for item in value:
        entry = _named(item)
        if entry is None:
            continue
        name, label, fields = entry
        definition = InputDefinition.from_name(name, definition=_as_text(fields.get("definition")))
        if label:
            definition = definition.model_copy(update={"label": label})
        definitions.append(definition)
    return definitions


def normalize_placeholders(raw: Any) -> ExtractedPlaceholders:
    """Coerce raw extraction output into ``ExtractedPlaceholders``.

    - Missing or wrongly-typed scalars become ``""``.
    - Missing or wrongly-typed lists become ``[]``; numbers inside string
      lists are stringified, other non-string items are dropped.
    - Object entries with missing sub-fields get ``""`` for them.
    - Extra keys are ignored; a non-object input yields an empty record.

    Normalizing an already-normalized record (or its ``model_dump()``) returns
    an equal record.

    Args:
        raw: Any JSON-decodable value, or an ``ExtractedPlaceholders``.

    Returns:
        A fully-populated ``ExtractedPlaceholders``.
    """
    if isinstance(raw, ExtractedPlaceholders):
        raw = raw.model_dump()
    if not isinstance(raw, dict):
        return ExtractedPlaceholders()

    values: dict[str, Any] = {}
    for key in _SCALAR_FIELDS:
        values[key] = _as_text(raw.get(key))
    for key in _LIST_FIELDS:
        values[key] = _as_text_list(raw.get(key))
    values["inputs"] = _normalize_inputs(raw)
    values["input_definitions"] = _normalize_definitions(raw.get("input_definitions"))
    return ExtractedPlaceholders(**values)
