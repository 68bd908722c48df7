"""
Stored record types for clientes and cidades.

Field names match the JSON keys kept in the store and returned to clients.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

from dacite import Config, from_dict

CLIENTES_COLLECTION = "clientes"
CIDADES_COLLECTION = "cidades"

DEFAULT_PAIS = "Brasil"


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2026-01-15T12:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class Cliente:
    id: str
    nome: str
    idade: Optional[int] = None
    email: Optional[str] = None
    telefone: Optional[str] = None
    cidadeId: Optional[str] = None
    criadoEm: Optional[str] = None
    atualizadoEm: Optional[str] = None

    def as_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_record(cls, data: dict) -> "Cliente":
        return from_dict(data_class=cls, data=data, config=Config(check_types=False))


@dataclass
class Cidade:
    id: str
    nome: str
    estado: Optional[str] = None
    pais: Optional[str] = DEFAULT_PAIS
    populacao: Optional[int] = None
    criadoEm: Optional[str] = None
    atualizadoEm: Optional[str] = None

    def as_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_record(cls, data: dict) -> "Cidade":
        return from_dict(data_class=cls, data=data, config=Config(check_types=False))


def cliente_path(cliente_id: str) -> str:
    return f"{CLIENTES_COLLECTION}/{cliente_id}"


def cidade_path(cidade_id: str) -> str:
    return f"{CIDADES_COLLECTION}/{cidade_id}"
