from __future__ import annotations

from sqlalchemy import func, inspect, select
from sqlalchemy.orm import Session

from tableside.infrastructure.db.models.menu import MenuCategoryModel, MenuItemModel
from tableside.infrastructure.db.session import get_engine

DEMO_CATALOG: list[tuple[str, list[dict]]] = [
    (
        "Coffee",
        [
            {
                "name": "Espresso",
                "description": "Double shot, house blend",
                "price": 250,
                "preparation_time": 3,
            },
            {
                "name": "Flat White",
                "description": "Espresso with steamed whole milk",
                "price": 380,
                "preparation_time": 5,
            },
            {
                "name": "Iced Latte",
                "description": "Espresso over ice and cold milk",
                "price": 420,
                "preparation_time": 5,
                "image_path": "iced-latte.jpg",
            },
        ],
    ),
    (
        "Breakfast",
        [
            {
                "name": "Avocado Toast",
                "description": "Sourdough, smashed avocado, chili flakes",
                "price": 950,
                "preparation_time": 12,
                "image_path": "avocado-toast.jpg",
            },
            {
                "name": "Granola Bowl",
                "description": "Yogurt, seasonal fruit, honey",
                "price": 780,
            },
        ],
    ),
    (
        "Pastry",
        [
            {
                "name": "Butter Croissant",
                "description": "Baked every morning",
                "price": 320,
                "preparation_time": 2,
            },
            {
                "name": "Cinnamon Roll",
                "description": "Cream cheese glaze",
                "price": 360,
                "preparation_time": 2,
                "is_available": False,
            },
        ],
    ),
]


def main() -> None:
    engine = get_engine(timeout_seconds=2.0)
    inspector = inspect(engine)
    required_tables = {"menu_categories", "menu_items"}
    if not required_tables.issubset(set(inspector.get_table_names())):
        print("no schema yet")
        return

    with Session(engine) as session:
        existing = session.execute(select(func.count(MenuCategoryModel.id))).scalar_one()
        if existing:
            print("catalog already seeded")
            return

        for category_name, items in DEMO_CATALOG:
            category = MenuCategoryModel(name=category_name, is_active=True)
            category.items = [
                MenuItemModel(
                    name=item["name"],
                    description=item.get("description"),
                    price=item["price"],
                    is_available=item.get("is_available", True),
                    preparation_time=item.get("preparation_time"),
                    image_path=item.get("image_path"),
                )
                for item in items
            ]
            session.add(category)

        session.commit()
        print("seed complete")


if __name__ == "__main__":
    main()
