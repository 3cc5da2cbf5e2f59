import logging

from django.core.management.base import BaseCommand
from django.db import transaction

from marketplace.models import Category, Server


logger = logging.getLogger(__name__)

SERVERS = [
    ("arbat", "Арбат"),
    ("patriki", "Патрики"),
    ("rublevka", "Рублевка"),
    ("tverskoy", "Тверской"),
]

# name, display name, icon, color, subcategories as (name, display name, icon)
CATEGORY_TREE = [
    (
        "cars",
        "Автомобили",
        "fas fa-car",
        "blue",
        [
            ("cars_standard", "Стандарт", "fas fa-car"),
            ("cars_sport", "Спорт", "fas fa-car-side"),
            ("cars_suv", "Внедорожники", "fas fa-truck"),
            ("cars_coupe", "Купе", "fas fa-car"),
            ("cars_motorcycle", "Мотоциклы", "fas fa-motorcycle"),
            ("cars_special", "Специальные", "fas fa-truck-monster"),
        ],
    ),
    (
        "realestate",
        "Недвижимость",
        "fas fa-home",
        "green",
        [
            ("realestate_house", "Дом", "fas fa-home"),
            ("realestate_cottage", "Коттедж", "fas fa-house-chimney"),
            ("realestate_apartment", "Квартира", "fas fa-building"),
            ("realestate_business", "Бизнес", "fas fa-briefcase"),
        ],
    ),
    (
        "fish",
        "Рыба",
        "fas fa-fish",
        "cyan",
        [
            ("fish_roach", "Плотва", "fas fa-fish"),
            ("fish_ruff", "Ерш", "fas fa-fish"),
            ("fish_trout", "Форель", "fas fa-fish"),
            ("fish_bream", "Лещ", "fas fa-fish"),
            ("fish_ide", "Язь", "fas fa-fish"),
            ("fish_catfish", "Сом", "fas fa-fish"),
            ("fish_pike", "Щука", "fas fa-fish"),
            ("fish_sturgeon", "Осетр", "fas fa-fish"),
        ],
    ),
    ("treasures", "Клады", "fas fa-gem", "purple", []),
]


class Command(BaseCommand):
    help = "Seeds game servers and the category tree. Safe to run repeatedly."

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS("Seeding reference data..."))

        created_count = 0
        with transaction.atomic():
            for name, display_name in SERVERS:
                _, created = Server.objects.get_or_create(name=name, defaults={"display_name": display_name})
                created_count += int(created)

            for name, display_name, icon, color, children in CATEGORY_TREE:
                parent, created = Category.objects.get_or_create(
                    name=name, defaults={"display_name": display_name, "icon": icon, "color": color}
                )
                created_count += int(created)
                for child_name, child_display_name, child_icon in children:
                    _, created = Category.objects.get_or_create(
                        name=child_name,
                        defaults={
                            "display_name": child_display_name,
                            "icon": child_icon,
                            "color": color,
                            "parent": parent,
                        },
                    )
                    created_count += int(created)

        logger.info(f"Reference data seeded, {created_count} rows created")
        self.stdout.write(self.style.SUCCESS(f"Reference data seeding complete. Created {created_count} rows."))
