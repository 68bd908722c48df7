"""
HTTP routes for the cadastro API.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from cadastro.dependencies import get_cidade_service, get_cliente_service
from cadastro.records import utc_now_iso
from cadastro.schemas import (
    CidadeClientesResponse,
    CidadeCreateRequest,
    CidadeDetailResponse,
    CidadeMutationResponse,
    CidadeUpdateRequest,
    ClienteCreateRequest,
    ClienteDetailResponse,
    ClienteMutationResponse,
    ClienteUpdateRequest,
    ErrorResponse,
    HealthResponse,
    ListCidadesResponse,
    ListClientesResponse,
    MessageResponse,
)
from cadastro.services import CidadeService, ClienteService

router = APIRouter()

ENDPOINTS = {
    "clientes": {
        "GET /clientes": "Listar todos os clientes",
        "GET /clientes/:id": "Buscar cliente por ID",
        "POST /clientes": "Criar novo cliente",
        "PUT /clientes/:id": "Atualizar cliente",
        "DELETE /clientes/:id": "Deletar cliente",
    },
    "cidades": {
        "GET /cidades": "Listar todas as cidades",
        "GET /cidades/:id": "Buscar cidade por ID",
        "POST /cidades": "Criar nova cidade",
        "PUT /cidades/:id": "Atualizar cidade",
        "DELETE /cidades/:id": "Deletar cidade",
    },
    "relacionais": {
        "GET /cidades/:id/clientes": "Buscar clientes de uma cidade",
    },
}

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _provided(payload) -> dict:
    """Fields the caller actually sent."""
    if payload is None:
        return {}
    return payload.model_dump(exclude_unset=True)


# ================================
# Clientes
# ================================


@router.post(
    "/clientes",
    response_model=ClienteMutationResponse,
    status_code=201,
    responses={**_ERRORS, 409: {"model": ErrorResponse}},
)
def create_cliente(
    payload: Optional[ClienteCreateRequest] = None,
    service: ClienteService = Depends(get_cliente_service),
):
    cliente = service.create(_provided(payload))
    return ClienteMutationResponse(
        mensagem="Cliente criado com sucesso!", cliente=cliente.as_dict()
    )


@router.get("/clientes", response_model=ListClientesResponse, responses=_ERRORS)
def list_clientes(service: ClienteService = Depends(get_cliente_service)):
    clientes = service.list()
    return ListClientesResponse(
        total=len(clientes), clientes=[c.as_dict() for c in clientes]
    )


@router.get(
    "/clientes/{cliente_id}",
    response_model=ClienteDetailResponse,
    response_model_exclude_unset=True,
    responses=_ERRORS,
)
def get_cliente(
    cliente_id: str, service: ClienteService = Depends(get_cliente_service)
):
    cliente, cidade = service.get(cliente_id)
    body = cliente.as_dict()
    if cidade is not None:
        body["cidade"] = cidade.as_dict()
    return body


@router.put(
    "/clientes/{cliente_id}",
    response_model=ClienteMutationResponse,
    responses=_ERRORS,
)
def update_cliente(
    cliente_id: str,
    payload: Optional[ClienteUpdateRequest] = None,
    service: ClienteService = Depends(get_cliente_service),
):
    cliente = service.update(cliente_id, _provided(payload))
    return ClienteMutationResponse(
        mensagem="Cliente atualizado com sucesso!", cliente=cliente.as_dict()
    )


@router.delete(
    "/clientes/{cliente_id}", response_model=MessageResponse, responses=_ERRORS
)
def delete_cliente(
    cliente_id: str, service: ClienteService = Depends(get_cliente_service)
):
    service.delete(cliente_id)
    return MessageResponse(mensagem="Cliente deletado com sucesso!")


# ================================
# Cidades
# ================================


@router.post(
    "/cidades",
    response_model=CidadeMutationResponse,
    status_code=201,
    responses={**_ERRORS, 409: {"model": ErrorResponse}},
)
def create_cidade(
    payload: Optional[CidadeCreateRequest] = None,
    service: CidadeService = Depends(get_cidade_service),
):
    cidade = service.create(_provided(payload))
    return CidadeMutationResponse(
        mensagem="Cidade criada com sucesso!", cidade=cidade.as_dict()
    )


@router.get("/cidades", response_model=ListCidadesResponse, responses=_ERRORS)
def list_cidades(service: CidadeService = Depends(get_cidade_service)):
    cidades = service.list()
    return ListCidadesResponse(
        total=len(cidades), cidades=[c.as_dict() for c in cidades]
    )


@router.get(
    "/cidades/{cidade_id}", response_model=CidadeDetailResponse, responses=_ERRORS
)
def get_cidade(
    cidade_id: str, service: CidadeService = Depends(get_cidade_service)
):
    cidade, clientes = service.get(cidade_id)
    return CidadeDetailResponse(
        **cidade.as_dict(),
        clientes=[c.as_dict() for c in clientes],
        totalClientes=len(clientes),
    )


@router.put(
    "/cidades/{cidade_id}", response_model=CidadeMutationResponse, responses=_ERRORS
)
def update_cidade(
    cidade_id: str,
    payload: Optional[CidadeUpdateRequest] = None,
    service: CidadeService = Depends(get_cidade_service),
):
    cidade = service.update(cidade_id, _provided(payload))
    return CidadeMutationResponse(
        mensagem="Cidade atualizada com sucesso!", cidade=cidade.as_dict()
    )


@router.delete(
    "/cidades/{cidade_id}", response_model=MessageResponse, responses=_ERRORS
)
def delete_cidade(
    cidade_id: str, service: CidadeService = Depends(get_cidade_service)
):
    service.delete(cidade_id)
    return MessageResponse(mensagem="Cidade deletada com sucesso!")


# ================================
# Relacionais
# ================================


@router.get(
    "/cidades/{cidade_id}/clientes",
    response_model=CidadeClientesResponse,
    responses=_ERRORS,
)
def list_clientes_da_cidade(
    cidade_id: str, service: CidadeService = Depends(get_cidade_service)
):
    cidade, clientes = service.clientes(cidade_id)
    return CidadeClientesResponse(
        cidade=cidade.nome,
        total=len(clientes),
        clientes=[c.as_dict() for c in clientes],
    )


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="OK", timestamp=utc_now_iso(), endpoints=ENDPOINTS)
