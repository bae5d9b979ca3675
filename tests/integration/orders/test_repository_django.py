"""Integration tests for OrderDjangoRepository against the test database."""

from __future__ import annotations

import pytest

from modules.orders.exceptions import ConcurrentModification, DuplicateKey
from modules.orders.models import Order
from modules.orders.repositories import OrderDjangoRepository

pytestmark = pytest.mark.integration


def _data(order_id: str = "ORD-1", **overrides):
    data = {
        "order_id": order_id,
        "customer_name": "Alice Smith",
        "phone": "5551234567",
        "product": "Desk lamp",
        "quantity": 1,
        "notes": "",
    }
    data.update(overrides)
    return data


@pytest.fixture()
def repo():
    return OrderDjangoRepository()


class TestInsert:
    def test_persists_pending_order(self, repo):
        order = repo.insert(_data())
        stored = Order.objects.get(order_id="ORD-1")
        assert stored.pk == order.pk
        assert stored.status == "pending"
        assert stored.version == 1

    def test_duplicate_order_id(self, repo):
        repo.insert(_data())
        with pytest.raises(DuplicateKey):
            repo.insert(_data())
        assert Order.objects.count() == 1


class TestReads:
    def test_find_by_id_skips_deleted(self, repo):
        repo.insert(_data())
        repo.soft_delete("ORD-1")
        assert repo.find_by_id("ORD-1") is None
        assert repo.get_for_update("ORD-1") is None

    def test_find_page_counts_before_slicing(self, repo):
        for n in range(1, 8):
            repo.insert(_data(f"ORD-{n}", quantity=n))

        items, total = repo.find_page({}, "quantity", False, page=2, page_size=3)

        assert total == 7
        assert [o.quantity for o in items] == [4, 5, 6]

    def test_find_page_past_the_end_is_empty(self, repo):
        for n in range(1, 4):
            repo.insert(_data(f"ORD-{n}"))

        items, total = repo.find_page({}, "created_at", True, page=5, page_size=2)

        assert items == []
        assert total == 3

    def test_find_page_on_empty_table(self, repo):
        assert repo.find_page({}, "created_at", True, page=1, page_size=10) == ([], 0)

    def test_find_page_filters(self, repo):
        repo.insert(_data("ORD-1", product="Coffee"))
        repo.insert(_data("ORD-2", product="Tea"))

        items, total = repo.find_page(
            {"product": "cof"}, "created_at", True, page=1, page_size=10
        )

        assert total == 1
        assert items[0].order_id == "ORD-1"


class TestSaveMutation:
    def test_bumps_version(self, repo):
        order = repo.insert(_data())
        order.quantity = 5

        saved = repo.save_mutation(order, ["quantity"])

        assert saved.version == 2
        assert Order.objects.get(order_id="ORD-1").quantity == 5

    def test_stale_copy_loses(self, repo):
        repo.insert(_data())
        first = Order.objects.get(order_id="ORD-1")
        second = Order.objects.get(order_id="ORD-1")

        first.quantity = 3
        repo.save_mutation(first, ["quantity"])
        second.quantity = 9

        with pytest.raises(ConcurrentModification):
            repo.save_mutation(second, ["quantity"])
        assert Order.objects.get(order_id="ORD-1").quantity == 3

    def test_ignores_immutable_fields(self, repo):
        order = repo.insert(_data())
        order.order_id = "ORD-99"

        repo.save_mutation(order, ["order_id"])

        assert Order.objects.filter(order_id="ORD-1").exists()

    def test_deleted_order_conflicts(self, repo):
        order = repo.insert(_data())
        repo.soft_delete("ORD-1")
        order.quantity = 2
        with pytest.raises(ConcurrentModification):
            repo.save_mutation(order, ["quantity"])


class TestDelete:
    def test_soft_delete_once(self, repo):
        repo.insert(_data())
        assert repo.soft_delete("ORD-1") is True
        assert repo.soft_delete("ORD-1") is False
        assert Order.objects.dead().count() == 1

    def test_hard_delete(self, repo):
        repo.insert(_data())
        assert repo.hard_delete("ORD-1") is True
        assert repo.hard_delete("ORD-1") is False
