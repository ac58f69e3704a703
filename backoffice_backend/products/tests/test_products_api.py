# products/tests/test_products_api.py

import uuid
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from products.models import Product
from products.services import adjust_quantity

User = get_user_model()


class ProductApiTests(TestCase):
    """
    GUARANTEES:
    - every authenticated user can list / search / read products
    - only admins can write the catalog
    - invalid regex searches are rejected with 400
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@example.com", password="pass12345", role="admin"
        )
        self.user = User.objects.create_user(
            email="clerk@example.com", password="pass12345", role="user"
        )

        self.lamp = Product.objects.create(name="Desk Lamp", price=Decimal("19.99"), quantity=3)
        self.chair = Product.objects.create(name="Office Chair", price=Decimal("89.00"), quantity=40)

    def test_requires_authentication(self):
        res = self.client.get("/api/products")
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn("message", res.data)

    def test_list_envelope(self):
        self.client.force_authenticate(user=self.user)

        res = self.client.get("/api/products", {"page": 1, "limit": 1})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total"], 2)
        self.assertEqual(res.data["page"], 1)
        self.assertEqual(res.data["limit"], 1)
        self.assertEqual(res.data["totalPages"], 2)
        self.assertEqual(len(res.data["products"]), 1)

    def test_trailing_slash_optional(self):
        self.client.force_authenticate(user=self.user)

        self.assertEqual(self.client.get("/api/products/").status_code, status.HTTP_200_OK)

    def test_regex_search(self):
        self.client.force_authenticate(user=self.user)

        res = self.client.get("/api/products", {"search": "^desk"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([p["name"] for p in res.data["products"]], ["Desk Lamp"])

    def test_invalid_regex_rejected(self):
        self.client.force_authenticate(user=self.user)

        res = self.client.get("/api/products", {"search": "(unclosed"})

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("message", res.data)

    def test_retrieve(self):
        self.client.force_authenticate(user=self.user)

        res = self.client.get(f"/api/products/{self.lamp.pk}")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["name"], "Desk Lamp")
        self.assertEqual(res.data["quantity"], 3)

    def test_retrieve_missing(self):
        self.client.force_authenticate(user=self.user)

        res = self.client.get(f"/api/products/{uuid.uuid4()}")

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_user_cannot_create(self):
        self.client.force_authenticate(user=self.user)

        res = self.client.post(
            "/api/products", {"name": "Stapler", "price": "4.50", "quantity": 10}, format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Product.objects.filter(name="Stapler").exists())

    def test_admin_crud(self):
        self.client.force_authenticate(user=self.admin)

        res = self.client.post(
            "/api/products", {"name": "Stapler", "price": "4.50", "quantity": 10}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        product_id = res.data["id"]

        res = self.client.patch(f"/api/products/{product_id}", {"price": "5.00"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(Product.objects.get(pk=product_id).price, Decimal("5.00"))

        res = self.client.delete(f"/api/products/{product_id}")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertFalse(Product.objects.filter(pk=product_id).exists())

    def test_name_edit_keeps_reserved_stock(self):
        self.client.force_authenticate(user=self.admin)
        adjust_quantity(self.chair.pk, -15)

        res = self.client.patch(f"/api/products/{self.chair.pk}", {"name": "Task Chair"}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["quantity"], 25)
        self.chair.refresh_from_db()
        self.assertEqual(self.chair.name, "Task Chair")
        self.assertEqual(self.chair.quantity, 25)

    def test_quantity_correction(self):
        self.client.force_authenticate(user=self.admin)

        res = self.client.put(
            f"/api/products/{self.lamp.pk}",
            {"name": "Desk Lamp", "price": "19.99", "quantity": 12},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["quantity"], 12)
        self.assertEqual(res.data["version"], 2)

    def test_negative_quantity_rejected(self):
        self.client.force_authenticate(user=self.admin)

        res = self.client.post(
            "/api/products", {"name": "Broken", "price": "1.00", "quantity": -1}, format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_low_stock(self):
        self.client.force_authenticate(user=self.user)

        res = self.client.get("/api/products/stats/low-stock", {"threshold": 5})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["products"][0]["name"], "Desk Lamp")

    def test_low_stock_invalid_threshold(self):
        self.client.force_authenticate(user=self.user)

        res = self.client.get("/api/products/stats/low-stock", {"threshold": "abc"})

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
