import pytest
from cart.modifiers import cart_modifiers
from common.hooks import hooks
from django.core.cache import cache


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def _restore_registries():
    """Tests may register hooks and modifiers; put the startup wiring back afterwards."""

    listeners = {name: list(entries) for name, entries in hooks._listeners.items()}
    sequence = hooks._sequence
    modifiers = cart_modifiers.modifiers
    yield
    hooks._listeners.clear()
    hooks._listeners.update(listeners)
    hooks._sequence = sequence
    cart_modifiers.clear()
    for modifier in modifiers:
        cart_modifiers.register(modifier)


@pytest.fixture
def api_client():
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def stock_recorder(settings):
    from cart.tests.doubles import RecordingStockService

    settings.SHOPCART_STOCK_SERVICE = "cart.tests.doubles.RecordingStockService"
    RecordingStockService.reset()
    yield RecordingStockService
    RecordingStockService.reset()
