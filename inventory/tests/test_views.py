from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from inventory.models import DailyTransfer, Product
from inventory.services import stock_ledger
from inventory.services.transfer import SESSION_KEY

from .factories import make_product


class ViewTestCase(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user("barkeep", password="pass")
        self.client.force_login(self.user)


class LoginRequiredTests(TestCase):
    def test_redirects_to_login(self):
        resp = self.client.get(reverse("inventory:inventory_list"))
        self.assertEqual(resp.status_code, 302)
        self.assertIn(reverse("login"), resp["Location"])


class InventoryScreensTests(ViewTestCase):
    def test_gateway_counts_low_stock(self):
        make_product("Kingfisher", godown=0, counter=0, min_level=5)
        resp = self.client.get(reverse("inventory:gateway"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.context["product_count"], 1)
        self.assertEqual(resp.context["low_stock_count"], 1)

    def test_inventory_list_filters(self):
        make_product("Kingfisher", godown=3)
        make_product("Old Monk", godown=3)
        resp = self.client.get(reverse("inventory:inventory_list"), {"q": "monk"})
        self.assertEqual([row[0].name for row in resp.context["rows"]], ["Old Monk"])

    def test_product_create_makes_stock_row_with_levels(self):
        resp = self.client.post(reverse("inventory:product_create"), {
            "name": "Tuborg", "variant": "500ml", "sku": "TB-500", "barcode": "",
            "price": "150.00", "cost": "90.00", "category": "Beer", "unit": "pcs", "description": "",
            "levels-min_stock_level": "6", "levels-max_stock_level": "200",
        })
        self.assertRedirects(resp, reverse("inventory:products_list"))
        product = Product.objects.get(sku="TB-500")
        self.assertIsNone(product.barcode)
        self.assertEqual((product.stock.min_stock_level, product.stock.max_stock_level), (6, 200))
        self.assertEqual(stock_ledger.get_stock(product.pk), (0, 0))

    def test_stock_edit(self):
        product = make_product("Kingfisher", godown=3, counter=1)
        resp = self.client.post(reverse("inventory:stock_edit", args=[product.pk]),
                                {"godown_stock": "10", "counter_stock": "2"})
        self.assertRedirects(resp, reverse("inventory:inventory_list"))
        self.assertEqual(stock_ledger.get_stock(product.pk), (10, 2))

    def test_single_transfer_rejects_overdraw(self):
        product = make_product("Kingfisher", godown=3)
        resp = self.client.post(reverse("inventory:stock_transfer", args=[product.pk]),
                                {"from_location": "godown", "to_location": "counter", "quantity": "4"})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.context["form"].errors)
        self.assertEqual(stock_ledger.get_stock(product.pk), (3, 0))


class DailyTransferViewTests(ViewTestCase):
    def setUp(self):
        super().setUp()
        self.url = reverse("inventory:daily_transfer")

    def _post(self, **data):
        return self.client.post(self.url, data)

    def test_stage_adjust_and_commit(self):
        product = make_product("Kingfisher", godown=50, counter=10)
        self._post(action="add", product_id=product.pk)
        self._post(action="set_quantity", product_id=product.pk, quantity=12)
        resp = self._post(action="commit")
        self.assertRedirects(resp, self.url)
        self.assertEqual(stock_ledger.get_stock(product.pk), (38, 22))
        self.assertEqual(DailyTransfer.objects.count(), 1)
        self.assertEqual(self.client.session[SESSION_KEY], [])
        follow = self.client.get(self.url)
        self.assertContains(follow, "Successfully transferred 1 items from godown to counter!")

    def test_commit_with_nothing_staged(self):
        self._post(action="commit")
        resp = self.client.get(self.url)
        self.assertContains(resp, "No items selected for transfer.")
        self.assertFalse(DailyTransfer.objects.exists())

    def test_zero_quantity_keeps_staging(self):
        product = make_product("Kingfisher", godown=5)
        self._post(action="add", product_id=product.pk)
        self._post(action="set_quantity", product_id=product.pk, quantity=0)
        self._post(action="commit")
        self.assertEqual(len(self.client.session[SESSION_KEY]), 1)
        self.assertEqual(stock_ledger.get_stock(product.pk), (5, 0))

    def test_only_godown_stock_is_listed(self):
        listed = make_product("Kingfisher", godown=5)
        make_product("Old Monk", godown=0, counter=5)
        resp = self.client.get(self.url)
        self.assertEqual(resp.context["products"], [listed])
        self.assertTrue(resp.context["has_products"])

    def test_history_and_export(self):
        product = make_product("Kingfisher", godown=5)
        self._post(action="add", product_id=product.pk)
        self._post(action="commit")
        record = DailyTransfer.objects.get()
        resp = self.client.get(reverse("inventory:transfer_history"))
        self.assertEqual(resp.context["records"], [record])
        export = self.client.get(reverse("inventory:transfer_export", args=[record.pk]))
        self.assertEqual(export["Content-Type"], "text/csv")
        body = b"".join(export.streaming_content).decode()
        self.assertIn("Daily Transfer Report", body)
        self.assertIn("Kingfisher", body)

    def test_godown_drop_after_staging_fails_commit(self):
        product = make_product("Kingfisher", godown=20)
        self._post(action="add", product_id=product.pk)
        self._post(action="set_quantity", product_id=product.pk, quantity=10)
        stock_ledger.update_stock(product.pk, 2, 0)

        self._post(action="commit")
        self.assertFalse(DailyTransfer.objects.exists())
        self.assertEqual(stock_ledger.get_stock(product.pk), (2, 0))
        staged = self.client.session[SESSION_KEY]
        self.assertEqual([(row["quantity"], row["available"]) for row in staged], [(10, 2)])

        resp = self.client.get(self.url)
        self.assertContains(resp, "Failed to transfer stock: Insufficient stock in godown")
        self.assertContains(resp, "(stock changed)")
