"""Cart quantity ceilings, on the service and over HTTP."""

import pytest

from app.models.artwork import Artwork
from app.services.cart_service import (
    GUEST_OWNER,
    UNBOUNDED_QUANTITY,
    CartLine,
    CartService,
    MemoryCartStore,
    max_quantity,
)


def artwork(artwork_id="art-1", **kwargs):
    fields = {"title": "Low Tide", "price": 100, "type": "original"}
    fields.update(kwargs)
    return Artwork(id=artwork_id, **fields)


class TestMaxQuantity:

    def test_original_is_one_of_a_kind(self):
        assert max_quantity(artwork(type="original")) == 1

    def test_limited_uses_remaining_editions(self):
        assert max_quantity(artwork(type="limited", edition_size=50, edition_remaining=3)) == 3

    def test_limited_without_remaining_is_unbounded(self):
        assert max_quantity(artwork(type="limited")) == UNBOUNDED_QUANTITY

    def test_open_edition_is_unbounded(self):
        assert max_quantity(artwork(type="open")) == UNBOUNDED_QUANTITY


class TestCartService:

    @pytest.fixture
    def catalog(self):
        return {
            "orig": artwork("orig", title="Salt Marsh"),
            "ltd": artwork("ltd", type="limited", edition_remaining=2),
            "open": artwork("open", type="open"),
            "gone": artwork("gone", title="Sea Glass", type="open", sold_out=True),
        }

    @pytest.fixture
    def cart(self, catalog):
        return CartService(MemoryCartStore(), catalog.get)

    def test_add_merges_lines(self, cart, catalog):
        cart.add_item("cus_1", catalog["open"], 2)
        lines, notice = cart.add_item("cus_1", catalog["open"], 3)

        assert notice is None
        assert lines == [CartLine("open", 5)]

    def test_second_original_is_rejected(self, cart, catalog):
        cart.add_item("cus_1", catalog["orig"])

        lines, notice = cart.add_item("cus_1", catalog["orig"])

        assert lines == [CartLine("orig", 1)]
        assert notice == "Maximum quantity reached: this is a one-of-a-kind original piece"

    def test_limited_over_remaining_leaves_line_unchanged(self, cart, catalog):
        cart.add_item("cus_1", catalog["ltd"], 1)

        lines, notice = cart.add_item("cus_1", catalog["ltd"], 2)

        assert lines == [CartLine("ltd", 1)]
        assert notice == "Maximum quantity reached: only 2 available"
        assert cart.get_cart("cus_1") == [CartLine("ltd", 1)]

    def test_sold_out_cannot_be_added(self, cart, catalog):
        lines, notice = cart.add_item("cus_1", catalog["gone"])

        assert lines == []
        assert notice == "Sea Glass is sold out"

    def test_update_enforces_same_ceiling(self, cart, catalog):
        cart.add_item("cus_1", catalog["ltd"], 1)

        lines, notice = cart.update_quantity("cus_1", catalog["ltd"], 3)

        assert lines == [CartLine("ltd", 1)]
        assert notice == "Maximum quantity reached: only 2 available"

        lines, notice = cart.update_quantity("cus_1", catalog["ltd"], 2)
        assert lines == [CartLine("ltd", 2)]
        assert notice is None

    def test_update_to_zero_removes(self, cart, catalog):
        cart.add_item("cus_1", catalog["open"], 2)

        lines, _ = cart.update_quantity("cus_1", catalog["open"], 0)

        assert lines == []

    def test_remove_and_clear(self, cart, catalog):
        cart.add_item("cus_1", catalog["open"])
        cart.add_item("cus_1", catalog["orig"])

        assert cart.remove_item("cus_1", "open") == [CartLine("orig", 1)]
        cart.clear("cus_1")
        assert cart.get_cart("cus_1") == []

    def test_merge_guest_cart(self, cart, catalog):
        cart.add_item("cus_1", catalog["orig"])
        cart.add_item(GUEST_OWNER, catalog["orig"])
        cart.add_item(GUEST_OWNER, catalog["open"], 2)

        lines, notices = cart.merge_guest_cart("cus_1")

        assert lines == [CartLine("orig", 1), CartLine("open", 2)]
        assert notices == ["Maximum quantity reached: this is a one-of-a-kind original piece"]
        assert cart.get_cart(GUEST_OWNER) == []

    def test_merging_guest_into_itself_keeps_cart(self, cart, catalog):
        cart.add_item(GUEST_OWNER, catalog["open"], 2)

        lines, notices = cart.merge_guest_cart(GUEST_OWNER)

        assert lines == [CartLine("open", 2)]
        assert notices == []
        assert cart.get_cart(GUEST_OWNER) == [CartLine("open", 2)]


class TestCartRoutes:

    def test_add_and_view(self, client, make_artwork):
        art = make_artwork(type="open")

        response = client.post("/api/cart/cus_1/items", json={"artworkId": art.id, "quantity": 2})

        assert response.status_code == 200
        assert response.json() == {"items": [{"artworkId": art.id, "quantity": 2}], "notice": None}
        assert client.get("/api/cart/cus_1").json()["items"] == [{"artworkId": art.id, "quantity": 2}]

    def test_over_limit_notice(self, client, make_artwork):
        art = make_artwork(type="original")
        client.post("/api/cart/cus_1/items", json={"artworkId": art.id})

        data = client.post("/api/cart/cus_1/items", json={"artworkId": art.id}).json()

        assert data["items"] == [{"artworkId": art.id, "quantity": 1}]
        assert data["notice"] == "Maximum quantity reached: this is a one-of-a-kind original piece"

    def test_update_remove_and_clear(self, client, make_artwork):
        art = make_artwork(type="limited", edition_remaining=4)
        other = make_artwork(type="open")
        client.post("/api/cart/cus_1/items", json={"artworkId": art.id})
        client.post("/api/cart/cus_1/items", json={"artworkId": other.id})

        updated = client.put(f"/api/cart/cus_1/items/{art.id}", json={"quantity": 4}).json()
        assert updated["items"][0] == {"artworkId": art.id, "quantity": 4}

        removed = client.delete(f"/api/cart/cus_1/items/{art.id}").json()
        assert removed["items"] == [{"artworkId": other.id, "quantity": 1}]

        assert client.delete("/api/cart/cus_1").json()["items"] == []
        assert client.get("/api/cart/cus_1").json()["items"] == []

    def test_unknown_artwork(self, client):
        response = client.post("/api/cart/cus_1/items", json={"artworkId": "missing"})

        assert response.status_code == 404

    def test_merge_guest(self, client, make_artwork):
        art = make_artwork(type="open")
        client.post("/api/cart/guest/items", json={"artworkId": art.id, "quantity": 3})

        data = client.post("/api/cart/cus_1/merge-guest").json()

        assert data["items"] == [{"artworkId": art.id, "quantity": 3}]
        assert data["notice"] is None
        assert client.get("/api/cart/guest").json()["items"] == []

    def test_merge_guest_into_guest_is_a_no_op(self, client, make_artwork):
        art = make_artwork(type="open")
        client.post("/api/cart/guest/items", json={"artworkId": art.id, "quantity": 2})

        data = client.post("/api/cart/guest/merge-guest").json()

        assert data["items"] == [{"artworkId": art.id, "quantity": 2}]
        assert client.get("/api/cart/guest").json()["items"] == [{"artworkId": art.id, "quantity": 2}]
