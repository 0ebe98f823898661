"""API routes, mounted under settings.API_PREFIX."""

from fastapi import APIRouter

from app.api.routes import clientes, health, ingredientes, pedidos, receitas, usuarios

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(usuarios.router, prefix="/usuarios", tags=["usuarios"])
router.include_router(ingredientes.router, prefix="/ingredientes", tags=["ingredientes"])
router.include_router(receitas.router, prefix="/receitas", tags=["receitas"])
router.include_router(clientes.router, prefix="/clientes", tags=["clientes"])
router.include_router(pedidos.router, prefix="/pedidos", tags=["pedidos"])
