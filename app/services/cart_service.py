import logging
import sys
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from sqlmodel import Session, select

from app.models.artwork import Artwork
from app.models.cart import CartItem

logger = logging.getLogger(__name__)

GUEST_OWNER = "guest"

# open editions and unknown remaining counts
UNBOUNDED_QUANTITY = sys.maxsize


@dataclass
class CartLine:
    artwork_id: str
    quantity: int


def max_quantity(artwork: Artwork) -> int:
    if artwork.type == "original":
        return 1
    if artwork.type == "limited" and artwork.edition_remaining is not None:
        return artwork.edition_remaining
    return UNBOUNDED_QUANTITY


def limit_notice(artwork: Artwork, limit: int) -> str:
    if artwork.type == "original":
        return "Maximum quantity reached: this is a one-of-a-kind original piece"
    return f"Maximum quantity reached: only {limit} available"


class CartStore:
    """Where cart lines live between requests, keyed by customer id or 'guest'."""

    def load(self, owner: str) -> List[CartLine]:
        raise NotImplementedError

    def save(self, owner: str, lines: List[CartLine]) -> None:
        raise NotImplementedError


class MemoryCartStore(CartStore):

    def __init__(self):
        self._carts: Dict[str, List[CartLine]] = {}

    def load(self, owner):
        return [CartLine(line.artwork_id, line.quantity) for line in self._carts.get(owner, [])]

    def save(self, owner, lines):
        self._carts[owner] = [CartLine(line.artwork_id, line.quantity) for line in lines]


class SqlCartStore(CartStore):

    def __init__(self, session: Session):
        self.session = session

    def load(self, owner):
        rows = self.session.exec(
            select(CartItem).where(CartItem.owner == owner).order_by(CartItem.id)
        ).all()
        return [CartLine(r.artwork_id, r.quantity) for r in rows]

    def save(self, owner, lines):
        rows = self.session.exec(
            select(CartItem).where(CartItem.owner == owner)
        ).all()
        for row in rows:
            self.session.delete(row)

        for line in lines:
            self.session.add(
                CartItem(owner=owner, artwork_id=line.artwork_id, quantity=line.quantity)
            )
        self.session.commit()


ArtworkLookup = Callable[[str], Optional[Artwork]]


class CartService:
    """Cart mutations that respect each artwork's quantity ceiling."""

    def __init__(self, store: CartStore, get_artwork: ArtworkLookup):
        self.store = store
        self.get_artwork = get_artwork

    def get_cart(self, owner: str) -> List[CartLine]:
        return self.store.load(owner)

    def add_item(self, owner: str, artwork: Artwork, quantity: int = 1) -> Tuple[List[CartLine], Optional[str]]:
        """
        Merge ``quantity`` units into the cart.

        Over the ceiling the cart is left as it was and a notice is returned.
        """
        lines = self.store.load(owner)
        if artwork.sold_out:
            return lines, f"{artwork.title} is sold out"

        limit = max_quantity(artwork)
        existing = next((line for line in lines if line.artwork_id == artwork.id), None)
        current = existing.quantity if existing else 0

        if current + quantity > limit:
            logger.info(f"Rejected cart add for {artwork.id}: {current}+{quantity} over limit {limit}")
            return lines, limit_notice(artwork, limit)

        if existing:
            existing.quantity = current + quantity
        else:
            lines.append(CartLine(artwork.id, quantity))

        self.store.save(owner, lines)
        return lines, None

    def update_quantity(self, owner: str, artwork: Artwork, quantity: int) -> Tuple[List[CartLine], Optional[str]]:
        lines = self.store.load(owner)

        if quantity <= 0:
            lines = [line for line in lines if line.artwork_id != artwork.id]
            self.store.save(owner, lines)
            return lines, None

        limit = max_quantity(artwork)
        if quantity > limit:
            return lines, limit_notice(artwork, limit)

        existing = next((line for line in lines if line.artwork_id == artwork.id), None)
        if not existing:
            return lines, None
        existing.quantity = quantity
        self.store.save(owner, lines)
        return lines, None

    def remove_item(self, owner: str, artwork_id: str) -> List[CartLine]:
        lines = [line for line in self.store.load(owner) if line.artwork_id != artwork_id]
        self.store.save(owner, lines)
        return lines

    def clear(self, owner: str) -> None:
        self.store.save(owner, [])

    def merge_guest_cart(self, owner: str) -> Tuple[List[CartLine], List[str]]:
        """Fold the guest cart into ``owner``'s cart, then empty the guest cart."""
        if owner == GUEST_OWNER:
            return self.store.load(owner), []

        notices = []
        for line in self.store.load(GUEST_OWNER):
            artwork = self.get_artwork(line.artwork_id)
            if not artwork:
                continue
            _, notice = self.add_item(owner, artwork, line.quantity)
            if notice:
                notices.append(notice)

        self.clear(GUEST_OWNER)
        return self.store.load(owner), notices
