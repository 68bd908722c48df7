"""
Cadastro API: REST endpoints for clientes and cidades.

This package provides a FastAPI application over a Firebase Realtime
Database store, with an in-memory store for local runs and tests.
"""
