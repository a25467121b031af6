import pytest


@pytest.fixture(scope="session")
def _pos_domain():
    """Initialize the pos domain once per session."""
    from pos.app import init_domain
    from pos.domain import pos

    init_domain()
    return pos


@pytest.fixture(autouse=True)
def run_around_tests(_pos_domain):
    """Push domain context before each test, pop it after."""
    ctx = _pos_domain.domain_context()
    ctx.push()

    yield

    ctx.pop()


@pytest.fixture
def catalog():
    from pos.menu.store import CatalogStore

    return CatalogStore()


@pytest.fixture
def orders():
    from pos.ordering.store import OrderStore

    return OrderStore()


@pytest.fixture
def seeded_catalog(catalog):
    from pos.menu.seed import seed_catalog

    seed_catalog(catalog)
    return catalog


@pytest.fixture
def item_named(seeded_catalog):
    """Look up a sample menu item by name."""

    def _find(name):
        return next(item for item in seeded_catalog.list() if item.name == name)

    return _find
