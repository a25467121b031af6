"""Sample menu loaded into a fresh catalog at process start."""

from pos.menu.item import MenuItem, Temperature
from pos.menu.store import CatalogStore

SAMPLE_FOOD = [
    # name, price, stock, cuisine, vegetarian
    ("Classic Burger", 12.99, 50, "American", False),
    ("Garden Salad", 8.99, 30, "International", True),
    ("Pasta Carbonara", 14.99, 25, "Italian", False),
]

SAMPLE_DRINKS = [
    # name, price, stock, alcoholic, temperature
    ("Espresso", 3.99, 100, False, Temperature.HOT),
    ("Craft Beer", 6.99, 40, True, Temperature.COLD),
    ("Orange Juice", 4.99, 60, False, Temperature.COLD),
]


def seed_catalog(store: CatalogStore) -> list[MenuItem]:
    """Fill ``store`` with the sample menu and return the new items."""
    items = [
        MenuItem.food_item(name, price, stock, cuisine, is_vegetarian)
        for name, price, stock, cuisine, is_vegetarian in SAMPLE_FOOD
    ]
    items += [
        MenuItem.drink_item(name, price, stock, is_alcoholic, temperature)
        for name, price, stock, is_alcoholic, temperature in SAMPLE_DRINKS
    ]
    for item in items:
        store.put(item)
    return items
