"""
Seed the reference catalogue: ingredient categories, meal types,
preparation methods and the shared goals every user can pick from.

Usage
-----

    # built-in defaults
    python -m scripts.seed_catalogue

    # custom catalogue (same keys as _DEFAULT_CATALOGUE) in a JSON file
    python -m scripts.seed_catalogue --file path/to/catalogue.json

Rows whose `nombre` already exists are left alone, so the script can be
re-run safely.
"""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any

from sqlalchemy import select

from services.db import (
    Base,
    CategoriaIngrediente,
    MetodoPreparacion,
    Objetivo,
    TipoComida,
    create_tables,
    dispose_engine,
    session_scope,
)

# ────────────────────────────────────────────────────────────────────
_DEFAULT_CATALOGUE: dict[str, list[dict[str, Any]]] = {
    "categorias": [
        {"nombre": "Proteínas"},
        {"nombre": "Vegetales"},
        {"nombre": "Frutas"},
        {"nombre": "Cereales"},
        {"nombre": "Lácteos"},
        {"nombre": "Grasas saludables"},
    ],
    "tipos_comida": [
        {"nombre": "Desayuno"},
        {"nombre": "Almuerzo"},
        {"nombre": "Cena"},
        {"nombre": "Snack"},
    ],
    "metodos": [
        {"nombre": "Horneado", "descripcion": "Cocción en horno con calor seco"},
        {"nombre": "A la plancha", "descripcion": "Cocción sobre superficie caliente"},
        {"nombre": "Al vapor", "descripcion": "Cocción con vapor de agua"},
        {"nombre": "Crudo", "descripcion": "Sin cocción"},
    ],
    "objetivos": [
        {"nombre": "Perder peso", "tiene_tiempo": True},
        {"nombre": "Ganar masa muscular", "tiene_tiempo": True},
        {"nombre": "Comer saludable", "tiene_tiempo": False},
    ],
}

_MODELS: dict[str, type[Base]] = {
    "categorias": CategoriaIngrediente,
    "tipos_comida": TipoComida,
    "metodos": MetodoPreparacion,
    "objetivos": Objetivo,
}


def _seedable_columns(model: type[Base]) -> set[str]:
    """Columns a catalogue row may set: no ids, no owner."""
    table = model.__table__
    return {c.name for c in table.columns if not c.primary_key and c.name != "usuario_id"}


async def _seed(catalogue: dict[str, list[dict[str, Any]]]) -> dict[str, int]:
    await create_tables()
    inserted: dict[str, int] = {}
    async with session_scope() as db:
        for key, rows in catalogue.items():
            model = _MODELS[key]
            stmt = select(model.nombre)
            if model is Objetivo:
                # a user's private goal must not hide the shared one
                stmt = stmt.where(Objetivo.usuario_id.is_(None))
            existing = set(await db.scalars(stmt))
            fresh = [r for r in rows if r["nombre"] not in existing]
            # objetivos seeded here have no owner: they are shared
            db.add_all(model(**r) for r in fresh)
            inserted[key] = len(fresh)
        await db.commit()
    await dispose_engine()
    return inserted


def _load_json(path: Path) -> dict[str, list[dict[str, Any]]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("JSON file must contain an object keyed by catalogue name")
    unknown = set(data) - set(_MODELS)
    if unknown:
        raise ValueError(f"unknown catalogue keys: {', '.join(sorted(unknown))}")

    for key, rows in data.items():
        if not isinstance(rows, list):
            raise ValueError(f"{key}: expected a list of rows")
        allowed = _seedable_columns(_MODELS[key])
        for i, row in enumerate(rows):
            if not isinstance(row, dict) or not row.get("nombre"):
                raise ValueError(f"{key}[{i}]: every row needs a non-empty 'nombre'")
            extra = set(row) - allowed
            if extra:
                raise ValueError(f"{key}[{i}]: unknown columns {', '.join(sorted(extra))}")
    return data


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--file",
        type=Path,
        help="optional JSON file with the catalogue to seed (overrides defaults)",
    )
    args = parser.parse_args()

    catalogue = _load_json(args.file) if args.file else _DEFAULT_CATALOGUE
    inserted = asyncio.run(_seed(catalogue))
    for key, count in inserted.items():
        print(f"✓ {key}: inserted {count}")


if __name__ == "__main__":
    main()
