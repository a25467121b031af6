"""POS composition root.

Initializes the Protean domain and wires one catalog, one order store and the
services that the screens use. The screens hold on to the returned
``PointOfSale``; nothing in the core is a global.
"""

import threading
from dataclasses import dataclass

from pos.config import load_settings
from pos.domain import logger, pos
from pos.menu.management import MenuService
from pos.menu.seed import seed_catalog
from pos.menu.store import CatalogStore
from pos.ordering.lifecycle import OrderService
from pos.ordering.store import OrderStore
from pos.payments.dispatcher import PaymentDispatcher

_init_lock = threading.Lock()
_initialized = False


def init_domain() -> None:
    """Initialize the ``pos`` domain once per process."""
    global _initialized
    with _init_lock:
        if not _initialized:
            pos.init()
            _initialized = True


@dataclass
class PointOfSale:
    catalog: CatalogStore
    orders: OrderStore
    menu: MenuService
    ordering: OrderService
    payments: PaymentDispatcher


def create_pos(seed: bool | None = None) -> PointOfSale:
    """Build a ready-to-use POS; ``seed`` defaults to ``POS_SEED_CATALOG``."""
    init_domain()
    settings = load_settings()

    catalog = CatalogStore()
    orders = OrderStore()

    should_seed = settings.seed_catalog if seed is None else seed

    if should_seed:
        with pos.domain_context():
            items = seed_catalog(catalog)
        logger.info("Sample catalog loaded", items=len(items))

    return PointOfSale(
        catalog=catalog,
        orders=orders,
        menu=MenuService(catalog),
        ordering=OrderService(orders, catalog),
        payments=PaymentDispatcher(orders, catalog),
    )
