from __future__ import annotations

import random
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from modules.orders.codes import code_number, next_code
from modules.orders.constants import OrderStatus
from modules.orders.models import (
    Order,
    OrderCodeSequence,
    OrderItem,
    OrderStatusHistory,
)
from modules.products.models import Product, StockAlert


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument("--orders", type=int, default=30)

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        products = self._seed_products()
        orders_created = self._seed_orders(products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="compras").exists():
            User.objects.create_user("compras", password="compras123")
            created += 1
        return created

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        catalog = [
            ("TEC-001", "Tecido Tricoline", "Azul"),
            ("TEC-002", "Tecido Tricoline", "Branco"),
            ("TEC-003", "Malha Algodão", "Preto"),
            ("TEC-004", "Malha Algodão", "Cinza"),
            ("TEC-005", "Linho Misto", "Bege"),
            ("AVI-001", "Botão 12mm", "Marfim"),
            ("AVI-002", "Zíper Invisível 20cm", "Preto"),
            ("AVI-003", "Elástico 3cm", "Branco"),
            ("AVI-004", "Linha Poliéster", "Vermelho"),
            ("EMB-001", "Caixa Papelão", ""),
        ]
        for code, name, color in catalog:
            product, _ = Product.objects.get_or_create(
                code=code,
                defaults={
                    "name": name,
                    "color": color,
                    "current_stock": random.randint(0, 1200),
                },
            )
            products.append(product)

        StockAlert.objects.get_or_create(
            product=products[0],
            defaults={
                "green_min": 301,
                "green_max": 800,
                "yellow_min": 101,
                "yellow_max": 300,
                "red_max": 100,
            },
        )
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    @transaction.atomic
    def _seed_orders(self, products: list[Product], count: int) -> int:
        self.stdout.write("Creating orders...")
        if not products:
            self.stdout.write(self.style.WARNING("Skipping orders (no products)."))
            return 0

        status_weights = [
            (OrderStatus.EMITIDO, 0.35),
            (OrderStatus.ENVIADO_FORNECEDOR, 0.20),
            (OrderStatus.EM_TRANSITO, 0.15),
            (OrderStatus.RECEBIDO, 0.15),
            (OrderStatus.CANCELADO, 0.10),
            (OrderStatus.DEVOLVIDO, 0.05),
        ]
        statuses = [s for s, _ in status_weights]
        weights = [w for _, w in status_weights]
        codes = list(Order.objects.values_list("code", flat=True))

        for _ in range(count):
            code = next_code(codes, OrderCodeSequence.current())
            codes.append(code)
            status = random.choices(statuses, weights=weights, k=1)[0]
            deadline = random.choice([None, 3, 5, 7, 10, 15, 30])

            order = Order.objects.create(
                code=code,
                status=status,
                delivery_deadline_days=deadline,
                supplier_name=random.choice(
                    ["Têxtil Paulista", "Aviamentos Sul", "Embalagens Norte"]
                ),
            )
            OrderCodeSequence.record(code_number(code))

            # Backdate so the list shows every alert color.
            created_at = timezone.now() - timedelta(
                days=random.randint(0, 20), hours=random.randint(0, 23)
            )
            expected = created_at + timedelta(days=deadline) if deadline else None
            Order.objects.filter(id=order.id).update(
                created_at=created_at, expected_delivery_date=expected
            )

            for product in random.sample(products, k=random.randint(1, 4)):
                OrderItem.objects.create(
                    order=order,
                    product=product,
                    quantity=random.randint(1, 500),
                )
            OrderStatusHistory.objects.create(
                order=order, new_status=status, notes="Seed"
            )

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return count
