# product_api/routes.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request, Response

from .database import ProductStore
from .handlers import (
    create_product_logic,
    delete_product_logic,
    get_product_logic,
    list_products_logic,
    update_product_logic,
)

router = APIRouter(prefix="/api/products", tags=["products"])


def get_store(request: Request) -> ProductStore:
    return request.app.state.store


# ---------------------------
# Product endpoints
# ---------------------------
@router.post("", status_code=201)
async def create_product(
    payload: Dict[str, Any] = Body(...),
    store: ProductStore = Depends(get_store),
):
    return await create_product_logic(store, payload)


@router.get("")
async def list_products(
    category: Optional[str] = None,
    inStock: Optional[str] = None,
    minPrice: Optional[str] = None,
    maxPrice: Optional[str] = None,
    minQuantity: Optional[str] = None,
    maxQuantity: Optional[str] = None,
    name: Optional[str] = None,
    description: Optional[str] = None,
    sortBy: Optional[str] = None,
    sortOrder: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    store: ProductStore = Depends(get_store),
):
    params = {
        "category": category,
        "inStock": inStock,
        "minPrice": minPrice,
        "maxPrice": maxPrice,
        "minQuantity": minQuantity,
        "maxQuantity": maxQuantity,
        "name": name,
        "description": description,
        "sortBy": sortBy,
        "sortOrder": sortOrder,
        "page": page,
        "limit": limit,
    }
    return await list_products_logic(store, params)


@router.get("/{product_id}")
async def get_product(product_id: str, store: ProductStore = Depends(get_store)):
    return await get_product_logic(store, product_id)


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    payload: Dict[str, Any] = Body(...),
    store: ProductStore = Depends(get_store),
):
    return await update_product_logic(store, product_id, payload)


@router.delete("/{product_id}", status_code=204, response_class=Response)
async def delete_product(product_id: str, store: ProductStore = Depends(get_store)):
    await delete_product_logic(store, product_id)
    return Response(status_code=204)
