from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from app.database import get_session
from app.dependencies.services import get_cart_service
from app.models.artwork import Artwork
from app.schemas.cart_schemas import CartAddRequest, CartResponse, CartUpdateRequest
from app.services.cart_service import CartService


router = APIRouter()


def _cart_response(lines, notice=None):
    return {
        "items": [{"artwork_id": line.artwork_id, "quantity": line.quantity} for line in lines],
        "notice": notice,
    }


def _get_artwork(session: Session, artwork_id: str) -> Artwork:
    artwork = session.get(Artwork, artwork_id)
    if not artwork:
        raise HTTPException(status_code=404, detail="Artwork not found")
    return artwork

# View Cart

@router.get("/{owner}", response_model=CartResponse)
def get_cart(owner: str, cart: CartService = Depends(get_cart_service)):
    return _cart_response(cart.get_cart(owner))

# Add to Cart

@router.post("/{owner}/items", response_model=CartResponse)
def add_to_cart(
    owner: str,
    data: CartAddRequest,
    session: Session = Depends(get_session),
    cart: CartService = Depends(get_cart_service),
):
    artwork = _get_artwork(session, data.artwork_id)
    lines, notice = cart.add_item(owner, artwork, data.quantity)
    return _cart_response(lines, notice)

# Update Cart

@router.put("/{owner}/items/{artwork_id}", response_model=CartResponse)
def update_cart_item(
    owner: str,
    artwork_id: str,
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    cart: CartService = Depends(get_cart_service),
):
    artwork = _get_artwork(session, artwork_id)
    lines, notice = cart.update_quantity(owner, artwork, data.quantity)
    return _cart_response(lines, notice)

# Remove Cart

@router.delete("/{owner}/items/{artwork_id}", response_model=CartResponse)
def remove_item(
    owner: str,
    artwork_id: str,
    cart: CartService = Depends(get_cart_service),
):
    return _cart_response(cart.remove_item(owner, artwork_id))

# Clear Cart

@router.delete("/{owner}", response_model=CartResponse)
def clear_cart(owner: str, cart: CartService = Depends(get_cart_service)):
    cart.clear(owner)
    return _cart_response([])


@router.post("/{owner}/merge-guest", response_model=CartResponse)
def merge_guest_cart(owner: str, cart: CartService = Depends(get_cart_service)):
    lines, notices = cart.merge_guest_cart(owner)
    return _cart_response(lines, "; ".join(notices) or None)
