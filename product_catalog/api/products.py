import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from product_catalog.database import get_products_collection
from product_catalog.exceptions import NotFoundError, UnexpectedError
from product_catalog.services.product_service import ProductService
from product_catalog.schemas.product import (
    PRODUCT_ID_PATTERN,
    ApiResponse,
    ErrorResponse,
    ProductCreate,
    ProductListData,
    ProductResponse,
    ProductUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Products"])

ProductId = Annotated[
    str,
    Path(pattern=PRODUCT_ID_PATTERN, description="Product ID (24-character hex ObjectId)"),
]

INVALID_PARAMS = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Invalid product ID"}}
VALIDATION_ERROR = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Invalid request or validation error"}}
NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Product not found"}}
SERVER_ERROR = {status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Internal server error"}}


def get_product_service(collection=Depends(get_products_collection)) -> ProductService:
    return ProductService(collection)


@router.get(
    "",
    response_model=ApiResponse[ProductListData],
    response_model_exclude_none=True,
    summary="Get all products",
    description="List every product, newest first.",
    responses={**SERVER_ERROR},
)
async def list_products(service: ProductService = Depends(get_product_service)):
    """Get all products."""
    try:
        products = [ProductResponse.model_validate(p) for p in await service.list_all()]
    except Exception as e:
        logger.exception("Error fetching products")
        raise UnexpectedError("Error fetching products", error=str(e))

    return ApiResponse[ProductListData](data=ProductListData(products=products))


@router.post(
    "",
    response_model=ApiResponse[ProductResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a new product with name, price, category and optional stock, description and release date.",
    responses={**VALIDATION_ERROR, **SERVER_ERROR},
)
async def create_product(
    product_data: ProductCreate,
    service: ProductService = Depends(get_product_service),
):
    """
    Create a new product.

    - **name**: Product name, 1-100 characters (required)
    - **price**: Product price, must be positive (required)
    - **category**: Product category, 1-50 characters (required)
    - **stock**: Initial stock quantity, non-negative (default 0)
    - **description**: Free text (optional)
    - **releaseDate**: ISO-8601 timestamp with a zone offset (optional)
    """
    try:
        product = ProductResponse.model_validate(await service.create(product_data))
    except Exception as e:
        logger.exception("Error creating product")
        raise UnexpectedError("Error creating product", error=str(e))

    return ApiResponse[ProductResponse](message="Product created successfully", data=product)


@router.get(
    "/{product_id}",
    response_model=ApiResponse[ProductResponse],
    response_model_exclude_none=True,
    summary="Get product by ID",
    responses={**INVALID_PARAMS, **NOT_FOUND, **SERVER_ERROR},
)
async def get_product(
    product_id: ProductId,
    service: ProductService = Depends(get_product_service),
):
    """Get a product by ID."""
    try:
        product = await service.get_by_id(product_id)
        data = None if product is None else ProductResponse.model_validate(product)
    except Exception as e:
        logger.exception(f"Error fetching product {product_id}")
        raise UnexpectedError("Error fetching product", error=str(e))

    if data is None:
        raise NotFoundError()

    return ApiResponse[ProductResponse](data=data)


@router.put(
    "/{product_id}",
    response_model=ApiResponse[ProductResponse],
    response_model_exclude_none=True,
    summary="Update a product",
    description="Update product details. Only provided fields will be updated.",
    responses={**VALIDATION_ERROR, **NOT_FOUND, **SERVER_ERROR},
)
async def update_product(
    product_id: ProductId,
    product_data: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    """
    Update a product.

    Partial updates are supported - only include fields you want to change.
    A malformed ID is rejected before the body is looked at.
    """
    try:
        product = await service.update(product_id, product_data)
        data = None if product is None else ProductResponse.model_validate(product)
    except Exception as e:
        logger.exception(f"Error updating product {product_id}")
        raise UnexpectedError("Error updating product", error=str(e))

    if data is None:
        raise NotFoundError()

    return ApiResponse[ProductResponse](message="Product updated successfully", data=data)


@router.delete(
    "/{product_id}",
    response_model=ApiResponse[ProductResponse],
    response_model_exclude_none=True,
    summary="Delete a product",
    responses={**INVALID_PARAMS, **NOT_FOUND, **SERVER_ERROR},
)
async def delete_product(
    product_id: ProductId,
    service: ProductService = Depends(get_product_service),
):
    """Delete a product."""
    try:
        deleted = await service.delete(product_id)
    except Exception as e:
        logger.exception(f"Error deleting product {product_id}")
        raise UnexpectedError("Error deleting product", error=str(e))

    if not deleted:
        raise NotFoundError()

    return ApiResponse[ProductResponse](message="Product deleted successfully")
