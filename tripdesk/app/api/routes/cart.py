"""Cart endpoints, scoped to the caller and one trip."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field

from tripdesk.app.api.auth import get_current_context
from tripdesk.app.api.deps import get_cart_service
from tripdesk.app.db.context import RequestContext
from tripdesk.app.models.cart import Cart, CartItem, CheckoutResult
from tripdesk.app.services.cart import CartService

router = APIRouter(prefix="/trips/{trip_id}/cart", tags=["cart"])


class AddItemResponse(BaseModel):
    """Response for POST /trips/{trip_id}/cart/items."""

    cart_id: str
    item_count: int


class SetQuantityRequest(BaseModel):
    """Request body for PUT /trips/{trip_id}/cart/items/quantity."""

    name: str = Field(..., min_length=1)
    type: str
    day: int | None = None
    quantity: int = Field(..., description="Zero or less removes the line")


class ItemCountResponse(BaseModel):
    """Response for GET /trips/{trip_id}/cart/count."""

    count: int


@router.get("", response_model=Cart | None)
async def get_cart(
    trip_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    carts: Annotated[CartService, Depends(get_cart_service)],
) -> Cart | None:
    """Get the caller's cart for a trip; ``null`` when there is none."""
    return carts.get_cart(ctx.owner_id, trip_id)


@router.post("/items", response_model=AddItemResponse, status_code=status.HTTP_201_CREATED)
async def add_item(
    trip_id: str,
    item: CartItem,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    carts: Annotated[CartService, Depends(get_cart_service)],
) -> AddItemResponse:
    """Add an item, merging with an existing line of the same name, day and flag."""
    cart_id = carts.add_item(ctx.owner_id, trip_id, item)
    return AddItemResponse(cart_id=cart_id, item_count=carts.item_count(ctx.owner_id, trip_id))


@router.delete("/items", status_code=status.HTTP_204_NO_CONTENT)
async def remove_item(
    trip_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    carts: Annotated[CartService, Depends(get_cart_service)],
    name: Annotated[str, Query(min_length=1)],
    day: Annotated[int | None, Query()] = None,
    skip_the_line: Annotated[bool | None, Query()] = None,
) -> Response:
    """Remove every line matching name, day and flag."""
    carts.remove_item(ctx.owner_id, trip_id, name, day=day, skip_the_line=skip_the_line)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/items/quantity", status_code=status.HTTP_204_NO_CONTENT)
async def set_item_quantity(
    trip_id: str,
    request: SetQuantityRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    carts: Annotated[CartService, Depends(get_cart_service)],
) -> Response:
    """Replace the quantity of lines matching name, type and day."""
    carts.set_item_quantity(
        ctx.owner_id, trip_id, request.name, request.type, request.day, request.quantity
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(
    trip_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    carts: Annotated[CartService, Depends(get_cart_service)],
) -> Response:
    """Delete the caller's cart for a trip."""
    carts.clear_cart(ctx.owner_id, trip_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/count", response_model=ItemCountResponse)
async def item_count(
    trip_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    carts: Annotated[CartService, Depends(get_cart_service)],
) -> ItemCountResponse:
    """Total quantity across all lines."""
    return ItemCountResponse(count=carts.item_count(ctx.owner_id, trip_id))


@router.post("/checkout", response_model=CheckoutResult)
async def checkout(
    trip_id: str,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    carts: Annotated[CartService, Depends(get_cart_service)],
) -> CheckoutResult:
    """Move the cart to checkout. An empty cart reports ``success=false`` with 200."""
    return carts.checkout(ctx.owner_id, trip_id)
