"""
Product Endpoints Module

This module exposes the phone catalogue. Any authenticated client may browse it;
only admins may add or remove products. The paginated list is cached per
(page, limit) pair and evicted as a whole whenever the catalogue changes.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, Response, status
from fastapi.responses import JSONResponse
from sqlmodel import Session, select

from bilemo.api import deps
from bilemo.core.cache import PRODUCTS_TAG, TagAwareCache, get_cache
from bilemo.core.config import settings
from bilemo.core.serializer import (
    PRODUCTS_GROUP,
    SerializationContext,
    normalize_many,
    project,
    to_payload,
)
from bilemo.core.versioning import get_api_version
from bilemo.db.session import get_db
from bilemo.models.client import Client, ClientRole
from bilemo.models.product import Product
from bilemo.schemas.product import ProductCreate, ProductRead

logger = logging.getLogger(__name__)

router = APIRouter()

require_admin_to_create = deps.RoleChecker(
    [ClientRole.ADMIN], "You do not have sufficient rights to create a product"
)
require_admin_to_delete = deps.RoleChecker(
    [ClientRole.ADMIN], "You do not have sufficient rights to delete a product"
)


def _context(request: Request, client: Client, version: float) -> SerializationContext:
    return SerializationContext(
        group=PRODUCTS_GROUP,
        version=version,
        is_admin=client.is_admin,
        url_for=request.url_for,
    )


@router.get("", name="list_products", responses={200: {"model": List[ProductRead]}})
def list_products(
    request: Request,
    page: int = Query(settings.PRODUCTS_DEFAULT_PAGE, ge=1, le=settings.PRODUCTS_MAX_PAGE),
    limit: int = Query(settings.PRODUCTS_DEFAULT_LIMIT, ge=1, le=settings.PRODUCTS_MAX_LIMIT),
    db: Session = Depends(get_db),
    cache: TagAwareCache = Depends(get_cache),
    version: float = Depends(get_api_version),
    current_client: Client = Depends(deps.get_current_client),
):
    """
    Retrieve one page of the product catalogue.

    The cached entry holds the normalized rows only; the version gate and the
    links (the delete link is admin-only) are applied per request.

    Args:
        page: 1-based page number (default 1, at most 100000)
        limit: Number of products per page (default 3, at most 100)
    """
    def load_page():
        statement = (
            select(Product)
            .order_by(Product.id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return normalize_many(db.exec(statement).all(), PRODUCTS_GROUP)

    rows = cache.get(f"getAllProducts-{page}-{limit}", load_page, tags=[PRODUCTS_TAG])
    context = _context(request, current_client, version)
    return JSONResponse(content=[project(row, context) for row in rows])


@router.get("/{product_id}", name="get_product", responses={200: {"model": ProductRead}})
def read_product(
    request: Request,
    product_id: int = Path(ge=1, le=deps.MAX_ID),
    db: Session = Depends(get_db),
    version: float = Depends(get_api_version),
    current_client: Client = Depends(deps.get_current_client),
):
    """
    Get a specific product by ID.

    Raises:
        HTTPException 404: If the product doesn't exist
    """
    product = db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    return JSONResponse(content=to_payload(product, _context(request, current_client, version)))


@router.post(
    "",
    name="create_product",
    status_code=status.HTTP_201_CREATED,
    responses={201: {"model": ProductRead}},
)
def create_product(
    product_in: ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    cache: TagAwareCache = Depends(get_cache),
    version: float = Depends(get_api_version),
    current_client: Client = Depends(require_admin_to_create),
):
    """
    Add a product to the catalogue. Admins only.

    Returns the serialized product with a Location header pointing at its
    detail endpoint.

    Raises:
        HTTPException 403: If the caller is not an admin
    """
    product = Product(**product_in.model_dump())
    db.add(product)
    db.commit()
    db.refresh(product)

    cache.invalidate_tags([PRODUCTS_TAG])
    logger.info("Client %s created product %s", current_client.id, product.id)

    location = str(request.url_for("get_product", product_id=product.id))
    return JSONResponse(
        content=to_payload(product, _context(request, current_client, version)),
        status_code=status.HTTP_201_CREATED,
        headers={"Location": location},
    )


@router.delete("/{product_id}", name="delete_product", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int = Path(ge=1, le=deps.MAX_ID),
    db: Session = Depends(get_db),
    cache: TagAwareCache = Depends(get_cache),
    current_client: Client = Depends(require_admin_to_delete),
):
    """
    Remove a product from the catalogue. Admins only.

    Raises:
        HTTPException 403: If the caller is not an admin
        HTTPException 404: If the product doesn't exist
    """
    product = db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    db.delete(product)
    db.commit()

    cache.invalidate_tags([PRODUCTS_TAG])
    logger.info("Client %s deleted product %s", current_client.id, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
