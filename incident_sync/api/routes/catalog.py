"""Catalog route — the reference tables the hub serves in every init frame."""

from fastapi import APIRouter

from ...dependencies import get_hub

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/")
async def get_catalog():
    return get_hub().catalog.to_wire()
