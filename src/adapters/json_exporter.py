"""Exportación JSON de lo que se está mostrando.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines.
- Permite guardar un listado o una ficha sin depender del render de la terminal.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from core.domain.models import CountrySummary, CountryView


def _write_json(payload: Any, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path


def export_countries_json(*, countries: Sequence[CountrySummary], output_path: Path) -> Path:
    """Exporta un listado de resúmenes conservando su orden."""

    return _write_json([c.model_dump(mode="json") for c in countries], output_path)


def export_view_json(*, view: CountryView, output_path: Path) -> Path:
    """Exporta la ficha de un país con sus vecinos."""

    return _write_json(view.model_dump(mode="json"), output_path)
