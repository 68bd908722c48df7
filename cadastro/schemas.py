"""
Pydantic schemas for the cadastro API.

Request models accept every field as optional; presence of required fields
is checked by the services so the API can answer with its own messages.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt

# Strict numbers so JSON booleans are rejected instead of read as 0 or 1.
IntLike = Union[StrictInt, StrictFloat, str]


class _RequestModel(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")


class ClienteCreateRequest(_RequestModel):
    id: Optional[str] = None
    nome: Optional[str] = None
    idade: Optional[IntLike] = None
    email: Optional[str] = None
    telefone: Optional[str] = None
    cidadeId: Optional[str] = None


class ClienteUpdateRequest(_RequestModel):
    nome: Optional[str] = None
    idade: Optional[IntLike] = None
    email: Optional[str] = None
    telefone: Optional[str] = None
    cidadeId: Optional[str] = None


class CidadeCreateRequest(_RequestModel):
    id: Optional[str] = None
    nome: Optional[str] = None
    estado: Optional[str] = None
    pais: Optional[str] = None
    populacao: Optional[IntLike] = None


class CidadeUpdateRequest(_RequestModel):
    nome: Optional[str] = None
    estado: Optional[str] = None
    pais: Optional[str] = None
    populacao: Optional[IntLike] = None


class ClienteOut(BaseModel):
    id: str
    nome: Optional[str] = None
    idade: Optional[int] = None
    email: Optional[str] = None
    telefone: Optional[str] = None
    cidadeId: Optional[str] = None
    criadoEm: Optional[str] = None
    atualizadoEm: Optional[str] = None


class CidadeOut(BaseModel):
    id: str
    nome: Optional[str] = None
    estado: Optional[str] = None
    pais: Optional[str] = None
    populacao: Optional[int] = None
    criadoEm: Optional[str] = None
    atualizadoEm: Optional[str] = None


class ClienteDetailResponse(ClienteOut):
    cidade: Optional[CidadeOut] = None


class CidadeDetailResponse(CidadeOut):
    clientes: list[ClienteOut]
    totalClientes: int


class ClienteMutationResponse(BaseModel):
    mensagem: str
    cliente: ClienteOut


class CidadeMutationResponse(BaseModel):
    mensagem: str
    cidade: CidadeOut


class MessageResponse(BaseModel):
    mensagem: str


class ListClientesResponse(BaseModel):
    total: int
    clientes: list[ClienteOut]


class ListCidadesResponse(BaseModel):
    total: int
    cidades: list[CidadeOut]


class CidadeClientesResponse(BaseModel):
    cidade: Optional[str]
    total: int
    clientes: list[ClienteOut]


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    endpoints: dict[str, dict[str, str]]


class ErrorResponse(BaseModel):
    erro: str
    clientesVinculados: Optional[int] = None
