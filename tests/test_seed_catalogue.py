# tests/test_seed_catalogue.py
from __future__ import annotations

import asyncio
import json

import pytest

from config import settings
from scripts.seed_catalogue import _DEFAULT_CATALOGUE, _load_json, _seed


@pytest.fixture
def sqlite_url(tmp_path, monkeypatch):
    monkeypatch.setattr(
        settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'seed.db'}"
    )


def test_seed_is_idempotent(sqlite_url):
    first = asyncio.run(_seed(_DEFAULT_CATALOGUE))
    assert first == {k: len(v) for k, v in _DEFAULT_CATALOGUE.items()}

    second = asyncio.run(_seed(_DEFAULT_CATALOGUE))
    assert set(second.values()) == {0}


def test_seed_adds_only_new_names(sqlite_url):
    asyncio.run(_seed({"categorias": [{"nombre": "Frutas"}]}))
    inserted = asyncio.run(_seed({"categorias": [{"nombre": "Frutas"}, {"nombre": "Granos"}]}))
    assert inserted == {"categorias": 1}


def test_load_json_rejects_unknown_keys(tmp_path):
    path = tmp_path / "catalogue.json"
    path.write_text(json.dumps({"postres": [{"nombre": "Flan"}]}), encoding="utf-8")
    with pytest.raises(ValueError, match="postres"):
        _load_json(path)


def test_load_json_requires_an_object(tmp_path):
    path = tmp_path / "catalogue.json"
    path.write_text(json.dumps([{"nombre": "Flan"}]), encoding="utf-8")
    with pytest.raises(ValueError):
        _load_json(path)


def test_private_goal_does_not_block_the_shared_one(client, auth):
    r = client.post("/objetivos", headers=auth, json={"nombre": "Perder peso"})
    assert r.status_code == 201

    inserted = client.portal.call(_seed, {"objetivos": [{"nombre": "Perder peso"}]})
    assert inserted == {"objetivos": 1}
    # seeding disposed the engine; the next request opens a fresh one
    shared = client.get("/public/objetivos").json()["data"]
    assert [(g["nombre"], g["usuarioId"]) for g in shared] == [("Perder peso", None)]


def test_load_json_rejects_rows_without_a_name(tmp_path):
    path = tmp_path / "catalogue.json"
    path.write_text(json.dumps({"metodos": [{"descripcion": "sin nombre"}]}), encoding="utf-8")
    with pytest.raises(ValueError, match="nombre"):
        _load_json(path)


def test_load_json_rejects_unknown_columns(tmp_path):
    path = tmp_path / "catalogue.json"
    path.write_text(
        json.dumps({"categorias": [{"nombre": "Frutas", "color": "rojo"}]}), encoding="utf-8"
    )
    with pytest.raises(ValueError, match="color"):
        _load_json(path)


def test_load_json_rejects_owned_goals(tmp_path):
    path = tmp_path / "catalogue.json"
    path.write_text(
        json.dumps({"objetivos": [{"nombre": "Mío", "usuario_id": 1}]}), encoding="utf-8"
    )
    with pytest.raises(ValueError, match="usuario_id"):
        _load_json(path)


def test_load_json_accepts_a_valid_catalogue(tmp_path):
    path = tmp_path / "catalogue.json"
    data = {"metodos": [{"nombre": "Al horno", "descripcion": "180 °C"}]}
    path.write_text(json.dumps(data), encoding="utf-8")
    assert _load_json(path) == data
