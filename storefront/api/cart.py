"""Cart API endpoints.

Provides endpoints for the caller's shopping cart:
- POST /cart - add a product
- GET /cart - list the cart
- DELETE /cart/{id} - remove one entry

The caller is identified by the X-User-ID header.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from storefront.api.deps import get_cart_service, get_current_user_id
from storefront.api.schemas import (
    CartItemCreateRequest,
    CartItemResponse,
    CartItemSchema,
    CartLineSchema,
    CartListResponse,
    ErrorResponse,
)
from storefront.cart.service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

CartServiceDep = Annotated[CartService, Depends(get_cart_service)]
UserIdDep = Annotated[str, Depends(get_current_user_id)]


@router.post(
    "",
    response_model=CartItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Product already in the cart"},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Add product to cart",
)
async def add_to_cart(
    body: CartItemCreateRequest,
    user_id: UserIdDep,
    service: CartServiceDep,
) -> CartItemResponse:
    """Add a product to the cart; each product appears at most once."""
    item = await service.add_item(user_id, str(body.product_id), body.quantity)
    return CartItemResponse(
        message="Added to cart.",
        data=CartItemSchema.model_validate(item),
    )


@router.get(
    "",
    response_model=CartListResponse,
    responses={401: {"model": ErrorResponse}},
    summary="List cart",
)
async def list_cart(user_id: UserIdDep, service: CartServiceDep) -> CartListResponse:
    """List the cart with product previews, newest entry first."""
    lines = await service.list_items(user_id)
    return CartListResponse(data=[CartLineSchema.model_validate(line) for line in lines])


@router.delete(
    "/{item_id}",
    response_model=CartItemResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Remove cart entry",
)
async def remove_from_cart(
    item_id: UUID,
    user_id: UserIdDep,
    service: CartServiceDep,
) -> CartItemResponse:
    removed = await service.remove_item(user_id, str(item_id))
    return CartItemResponse(
        message="Item removed",
        data=CartItemSchema.model_validate(removed),
    )
