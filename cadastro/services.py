"""
Resource handlers for clientes and cidades.

Each operation runs its existence checks against the store before any
mutating call. Inputs are plain dicts holding only the fields the caller
sent, so "absent" and "explicitly null" can be told apart on update.
"""

from __future__ import annotations

import dataclasses
import logging
import math
import re
from typing import Any, Optional

from cadastro.db import DbClient
from cadastro.errors import (
    ConflictError,
    IntegrityError,
    NotFoundError,
    ValidationError,
)
from cadastro.records import (
    CIDADES_COLLECTION,
    CLIENTES_COLLECTION,
    DEFAULT_PAIS,
    Cidade,
    Cliente,
    cidade_path,
    cliente_path,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

CLIENTE_REQUIRED_MESSAGE = "Campos obrigatórios: id, nome, idade"
CIDADE_REQUIRED_MESSAGE = "Campos obrigatórios: id, nome, estado"
CLIENTE_EXISTS_MESSAGE = "Cliente com este ID já existe"
CIDADE_EXISTS_MESSAGE = "Cidade com este ID já existe"
CLIENTE_NOT_FOUND_MESSAGE = "Cliente não encontrado"
CIDADE_NOT_FOUND_MESSAGE = "Cidade não encontrada"
CIDADE_HAS_CLIENTES_MESSAGE = "Não é possível deletar cidade com clientes vinculados"
INVALID_ID_MESSAGE = "ID inválido: não pode conter '.', '$', '#', '[', ']' ou '/'"

# Characters Firebase Realtime Database rejects in keys.
_INVALID_KEY_CHARS = re.compile(r"[.$#\[\]/\x00-\x1f\x7f]")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def is_valid_key(key: str) -> bool:
    return bool(key) and not _INVALID_KEY_CHARS.search(key)


def coerce_int(value: Any, field: str) -> int:
    """Coerce ints, floats (truncated) and strings with a leading integer."""
    if isinstance(value, bool):
        raise ValidationError(f"Campo {field} deve ser um número inteiro")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    raise ValidationError(f"Campo {field} deve ser um número inteiro")


def _require_text(changes: dict, field: str) -> Optional[str]:
    """Return the new value of a required text field, or None to keep the stored one."""
    value = changes.get(field)
    if value is None:
        return None
    if value == "":
        raise ValidationError(f"Campo {field} não pode ser vazio")
    return value


class _RecordLookup:
    """Shared store access for the two resource handlers."""

    def __init__(self, db: DbClient):
        self.db = db

    def find_cidade(self, cidade_id: str) -> Optional[Cidade]:
        if not is_valid_key(cidade_id):
            return None
        record = self.db.get(cidade_path(cidade_id))
        if record is None:
            return None
        return Cidade.from_record(record)

    def find_cliente(self, cliente_id: str) -> Optional[Cliente]:
        if not is_valid_key(cliente_id):
            return None
        record = self.db.get(cliente_path(cliente_id))
        if record is None:
            return None
        return Cliente.from_record(record)

    def clientes_da_cidade(self, cidade_id: str) -> list[Cliente]:
        records = self.db.find_by_field(CLIENTES_COLLECTION, "cidadeId", cidade_id)
        return [Cliente.from_record(record) for record in records]


class ClienteService(_RecordLookup):
    def _load(self, cliente_id: str) -> Cliente:
        cliente = self.find_cliente(cliente_id)
        if cliente is None:
            raise NotFoundError(CLIENTE_NOT_FOUND_MESSAGE)
        return cliente

    def _require_cidade(self, cidade_id: str) -> None:
        if self.find_cidade(cidade_id) is None:
            raise ValidationError(CIDADE_NOT_FOUND_MESSAGE)

    def create(self, data: dict) -> Cliente:
        if any(_is_blank(data.get(field)) for field in ("id", "nome", "idade")):
            raise ValidationError(CLIENTE_REQUIRED_MESSAGE)
        cliente_id = data["id"]
        if not is_valid_key(cliente_id):
            raise ValidationError(INVALID_ID_MESSAGE)
        idade = coerce_int(data["idade"], "idade")

        if self.db.get(cliente_path(cliente_id)) is not None:
            raise ConflictError(CLIENTE_EXISTS_MESSAGE)

        cidade_id = data.get("cidadeId") or None
        if cidade_id:
            self._require_cidade(cidade_id)

        now = utc_now_iso()
        cliente = Cliente(
            id=cliente_id,
            nome=data["nome"],
            idade=idade,
            email=data.get("email") or None,
            telefone=data.get("telefone") or None,
            cidadeId=cidade_id,
            criadoEm=now,
            atualizadoEm=now,
        )
        if not self.db.create_if_absent(cliente_path(cliente_id), cliente.as_dict()):
            # Lost the race against a concurrent create for the same id.
            raise ConflictError(CLIENTE_EXISTS_MESSAGE)
        logger.info("Created cliente %s", cliente_id)
        return cliente

    def list(self) -> list[Cliente]:
        return [
            Cliente.from_record(record)
            for record in self.db.list_all(CLIENTES_COLLECTION)
        ]

    def get(self, cliente_id: str) -> tuple[Cliente, Optional[Cidade]]:
        """Return the cliente and, when linked and still present, its cidade."""
        cliente = self._load(cliente_id)
        cidade = None
        if cliente.cidadeId:
            try:
                cidade = self.find_cidade(cliente.cidadeId)
            except Exception:
                logger.warning(
                    "Could not load cidade %s for cliente %s",
                    cliente.cidadeId,
                    cliente_id,
                    exc_info=True,
                )
        return cliente, cidade

    def update(self, cliente_id: str, changes: dict) -> Cliente:
        current = self._load(cliente_id)

        nome = _require_text(changes, "nome")
        idade = changes.get("idade")
        if idade is not None:
            idade = coerce_int(idade, "idade")

        cidade_id = changes.get("cidadeId")
        if cidade_id:
            self._require_cidade(cidade_id)

        updated = dataclasses.replace(current, atualizadoEm=utc_now_iso())
        if nome is not None:
            updated.nome = nome
        if idade is not None:
            updated.idade = idade
        for field in ("email", "telefone"):
            if field in changes:
                setattr(updated, field, changes[field])
        if "cidadeId" in changes:
            updated.cidadeId = cidade_id or None

        self.db.set(cliente_path(cliente_id), updated.as_dict())
        logger.info("Updated cliente %s", cliente_id)
        return updated

    def delete(self, cliente_id: str) -> None:
        self._load(cliente_id)
        self.db.delete(cliente_path(cliente_id))
        logger.info("Deleted cliente %s", cliente_id)


class CidadeService(_RecordLookup):
    def _load(self, cidade_id: str) -> Cidade:
        cidade = self.find_cidade(cidade_id)
        if cidade is None:
            raise NotFoundError(CIDADE_NOT_FOUND_MESSAGE)
        return cidade

    def create(self, data: dict) -> Cidade:
        if any(_is_blank(data.get(field)) for field in ("id", "nome", "estado")):
            raise ValidationError(CIDADE_REQUIRED_MESSAGE)
        cidade_id = data["id"]
        if not is_valid_key(cidade_id):
            raise ValidationError(INVALID_ID_MESSAGE)
        populacao = data.get("populacao")
        populacao = None if _is_blank(populacao) else coerce_int(populacao, "populacao")

        if self.db.get(cidade_path(cidade_id)) is not None:
            raise ConflictError(CIDADE_EXISTS_MESSAGE)

        now = utc_now_iso()
        cidade = Cidade(
            id=cidade_id,
            nome=data["nome"],
            estado=data["estado"],
            pais=data.get("pais") or DEFAULT_PAIS,
            populacao=populacao,
            criadoEm=now,
            atualizadoEm=now,
        )
        if not self.db.create_if_absent(cidade_path(cidade_id), cidade.as_dict()):
            raise ConflictError(CIDADE_EXISTS_MESSAGE)
        logger.info("Created cidade %s", cidade_id)
        return cidade

    def list(self) -> list[Cidade]:
        return [
            Cidade.from_record(record)
            for record in self.db.list_all(CIDADES_COLLECTION)
        ]

    def get(self, cidade_id: str) -> tuple[Cidade, list[Cliente]]:
        cidade = self._load(cidade_id)
        return cidade, self.clientes_da_cidade(cidade_id)

    def update(self, cidade_id: str, changes: dict) -> Cidade:
        current = self._load(cidade_id)

        texts = {
            field: _require_text(changes, field) for field in ("nome", "estado", "pais")
        }
        populacao = changes.get("populacao")
        if not _is_blank(populacao):
            populacao = coerce_int(populacao, "populacao")

        updated = dataclasses.replace(current, atualizadoEm=utc_now_iso())
        for field, value in texts.items():
            if value is not None:
                setattr(updated, field, value)
        if "populacao" in changes:
            updated.populacao = None if _is_blank(populacao) else populacao

        self.db.set(cidade_path(cidade_id), updated.as_dict())
        logger.info("Updated cidade %s", cidade_id)
        return updated

    def delete(self, cidade_id: str) -> None:
        self._load(cidade_id)
        vinculados = self.clientes_da_cidade(cidade_id)
        if vinculados:
            logger.info(
                "Refusing to delete cidade %s: %d linked clientes",
                cidade_id,
                len(vinculados),
            )
            raise IntegrityError(CIDADE_HAS_CLIENTES_MESSAGE, len(vinculados))
        self.db.delete(cidade_path(cidade_id))
        logger.info("Deleted cidade %s", cidade_id)

    def clientes(self, cidade_id: str) -> tuple[Cidade, list[Cliente]]:
        """Return the cidade and every cliente whose cidadeId points at it."""
        cidade = self._load(cidade_id)
        return cidade, self.clientes_da_cidade(cidade_id)
