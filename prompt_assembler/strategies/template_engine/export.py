"""Tabular export of extracted placeholder values.

Flattens ``ExtractedPlaceholders`` into ``placeholder,content`` rows, with
repeat groups spread over indexed keys and the derived keys the templates use.
"""

import csv
import io

from prompt_assembler.strategies.template_engine.expansion import (
    format_bullet_list,
    format_mark_checklist,
)
from prompt_assembler.strategies.template_engine.models import (
    ExtractedPlaceholders,
    PlaceholderRow,
)

CSV_COLUMNS = ("placeholder", "content")


def placeholders_to_rows(data: ExtractedPlaceholders) -> list[PlaceholderRow]:
    """Flatten placeholder values into export rows.

    Optional sections (examples, input variables, criteria guidance) only
    produce rows when they carry content.
    """
    rows: list[PlaceholderRow] = [
        PlaceholderRow(placeholder="artifact_name", content=data.artifact_name),
        PlaceholderRow(placeholder="defined_scope", content=data.defined_scope),
        PlaceholderRow(
            placeholder="hard_boundary_may_not",
            content=format_bullet_list(data.hard_boundary_may_not),
        ),
        PlaceholderRow(placeholder="definition", content=data.definition),
    ]

    if data.examples:
        rows.append(PlaceholderRow(placeholder="examples", content=format_bullet_list(data.examples)))

    for n, variable in enumerate(data.inputs, start=1):
        rows.append(PlaceholderRow(placeholder=f"variable{n}_name", content=variable.name))
        rows.append(PlaceholderRow(placeholder=f"variable{n}_use", content=variable.use))

    rows.append(PlaceholderRow(placeholder="checklist", content=format_bullet_list(data.checklist)))

    if data.criteria_guidance.strip():
        rows.append(PlaceholderRow(placeholder="criteria_guidance", content=data.criteria_guidance))

    # Derived keys
    rows.append(PlaceholderRow(placeholder="target_artifact", content=data.artifact_name))
    rows.append(
        PlaceholderRow(
            placeholder="checklist_with_marks",
            content=format_mark_checklist(data.checklist),
        )
    )
    if data.inputs:
        rows.append(
            PlaceholderRow(
                placeholder="input_variables_list",
                content="\n".join(
                    f"{entry.display_name} = {entry.bracketed_name}"
                    for entry in data.input_variables_list
                ),
            )
        )
    return rows


def rows_to_csv(rows: list[PlaceholderRow]) -> str:
    """Serialize rows as CSV with a ``placeholder,content`` header."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\r\n")
    writer.writerow(CSV_COLUMNS)
    for row in rows:
        writer.writerow((row.placeholder, row.content))
    return buffer.getvalue()


def csv_filename(artifact_name: str) -> str:
    """Return the download file name for an artifact's placeholder CSV."""
    name = artifact_name.strip().replace("/", "-").replace('"', "")
    return f"{name} placeholders.csv" if name else "placeholders.csv"
