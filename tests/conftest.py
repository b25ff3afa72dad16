"""
Pytest fixtures for Stockwatch tests.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.contrib.contenttypes.models import ContentType
from django.utils import timezone

from stockwatch.models import HealthStatus, StockBatch, Warehouse
from testproject.catalog.models import Category, Product


User = get_user_model()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='testuser',
        password='testpass123'
    )


@pytest.fixture
def category(db):
    """Create a test category (no threshold override)."""
    return Category.objects.create(name='Eletrônicos')


@pytest.fixture
def product(db, category):
    """Create a test product worth 500 per unit."""
    return Product.objects.create(
        name='Notebook',
        sku='NB-001',
        unit_price=Decimal('500.00'),
        category=category,
    )


@pytest.fixture
def cheap_product(db, category):
    """Create a second, cheaper product."""
    return Product.objects.create(
        name='Mouse',
        sku='MS-001',
        unit_price=Decimal('20.00'),
        category=category,
    )


@pytest.fixture
def warehouse(db):
    """Main warehouse of company 'acme'."""
    return Warehouse.objects.create(company='acme', code='central', name='Central')


@pytest.fixture
def other_warehouse(db):
    """Second warehouse of company 'acme'."""
    return Warehouse.objects.create(company='acme', code='filial', name='Filial Sul')


@pytest.fixture
def now():
    """Fixed reference instant for reclassification runs."""
    return timezone.now()


@pytest.fixture
def make_batch(db, product, warehouse, now):
    """
    Factory for batches with arbitrary stored (possibly stale) age/status.

    Bypasses stock.receive() so tests can set up the state a previous
    run would have left behind.
    """
    counter = {'n': 0}

    def _make(days_ago, quantity=40, status=HealthStatus.HEALTHY, age=0,
              product=product, warehouse=warehouse, batch_id=None, expiry_date=None):
        counter['n'] += 1
        return StockBatch.objects.create(
            company=warehouse.company,
            batch_id=batch_id or f'B-{counter["n"]:04d}',
            product_type=ContentType.objects.get_for_model(product),
            product_id=product.pk,
            warehouse=warehouse,
            quantity_received=quantity,
            quantity_available=quantity,
            entry_date=now - timedelta(days=days_ago),
            expiry_date=expiry_date,
            age_in_days=age,
            status=status,
        )

    return _make
