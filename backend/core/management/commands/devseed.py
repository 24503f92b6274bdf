from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from accounts.models import User
from bookings.models import Booking
from reviews.models import Review
from reviews.services import create_review
from tours.models import Tour, TourLocation, TourStartDate

SEED_PASSWORD = "Trailpass123!"
SUPERUSER_EMAIL = "admin@trailpass.test"
SUPERUSER_PASSWORD = "AdminTrailpass123!"

TOURS = [
    {
        "name": "The Forest Hiker",
        "duration": 5,
        "max_group_size": 25,
        "difficulty": Tour.EASY,
        "price": Decimal("397"),
        "summary": "Breathtaking hike through the Canadian Banff National Park",
        "image_cover": "tour-1-cover.jpg",
        "start": (51.417611, -116.214531, "Banff, CAN"),
        "stops": [(51.417611, -116.214531, "Banff National Park", 1), (51.261937, -115.729122, "Jasper National Park", 3)],
    },
    {
        "name": "The Sea Explorer",
        "duration": 7,
        "max_group_size": 15,
        "difficulty": Tour.MEDIUM,
        "price": Decimal("497"),
        "price_discount": Decimal("397"),
        "summary": "Exploring the jaw-dropping US east coast by foot and by boat",
        "image_cover": "tour-2-cover.jpg",
        "start": (25.781842, -80.128473, "Miami, USA"),
        "stops": [(25.790654, -80.130045, "Lummus Park Beach", 1), (24.555398, -81.804512, "Key West", 5)],
    },
    {
        "name": "Glacier Trek",
        "duration": 3,
        "max_group_size": 10,
        "difficulty": Tour.DIFFICULT,
        "price": Decimal("250"),
        "summary": "Crampons, ropes and the quiet of a high glacier",
        "image_cover": "tour-3-cover.jpg",
        "start": (46.852947, -121.760424, "Paradise, WA"),
        "stops": [(46.858496, -121.726925, "Camp Muir", 2)],
    },
    {
        "name": "The Secret Summit",
        "duration": 2,
        "max_group_size": 4,
        "difficulty": Tour.DIFFICULT,
        "price": Decimal("1200"),
        "summary": "An invitation-only ascent",
        "image_cover": "tour-4-cover.jpg",
        "secret_tour": True,
        "start": (45.832622, 6.865175, "Chamonix, FRA"),
        "stops": [],
    },
]


class Command(BaseCommand):
    help = "Populate the local development database with sample data."

    def add_arguments(self, parser):
        parser.add_argument(
            "--flush",
            action="store_true",
            help="Delete existing tours, reviews, bookings and non-superuser users before seeding.",
        )

    def handle(self, *args, **options):
        if not settings.DEBUG:
            raise CommandError("Refusing to seed data while DEBUG is False.")

        with transaction.atomic():
            if options["flush"]:
                self.stdout.write(self.style.MIGRATE_HEADING("Removing tours, reviews, bookings and users"))
                Booking.objects.all().delete()
                Review.objects.all().delete()
                Tour.all_objects.all().delete()
                User.objects.filter(is_superuser=False).delete()

            self.stdout.write(self.style.MIGRATE_HEADING("Creating users"))
            lead_guide = self._ensure_user("lead@trailpass.test", "Leo Lead", User.LEAD_GUIDE)
            guide = self._ensure_user("guide@trailpass.test", "Gabe Guide", User.GUIDE)
            hikers = [
                self._ensure_user("hana@example.test", "Hana Hiker", User.USER),
                self._ensure_user("sam@example.test", "Sam Summit", User.USER),
            ]

            self.stdout.write(self.style.MIGRATE_HEADING("Ensuring admin superuser"))
            self._ensure_superuser()

            self.stdout.write(self.style.MIGRATE_HEADING("Creating tours"))
            tours = [self._ensure_tour(spec, guides=[lead_guide, guide]) for spec in TOURS]

            self.stdout.write(self.style.MIGRATE_HEADING("Creating reviews and bookings"))
            for tour, rating in zip(tours[:3], (5, 4, 5)):
                for hiker in hikers:
                    if not Review.objects.filter(tour=tour, user=hiker).exists():
                        create_review(tour=tour, user=hiker, review=f"Loved {tour.name}!", rating=rating)
            if not Booking.objects.filter(user=hikers[0]).exists():
                Booking.objects.create(tour=tours[2], user=hikers[0], price=tours[2].price)

        self.stdout.write(self.style.SUCCESS("Development seed data created."))
        self.stdout.write(self.style.NOTICE(f"Sample login accounts use password: {SEED_PASSWORD}"))
        self.stdout.write(self.style.NOTICE(f"Admin superuser {SUPERUSER_EMAIL} password: {SUPERUSER_PASSWORD}"))

    def _ensure_user(self, email: str, name: str, role: str) -> User:
        user, created = User.objects.get_or_create(
            email=email,
            defaults={"username": email, "name": name, "role": role},
        )
        if created:
            user.set_password(SEED_PASSWORD)
            user.save()
        elif user.name != name or user.role != role:
            user.name = name
            user.role = role
            user.save(update_fields=["name", "role"])
        return user

    def _ensure_superuser(self) -> User:
        user = User.objects.filter(email=SUPERUSER_EMAIL).first()
        if user is None:
            return User.objects.create_superuser(
                email=SUPERUSER_EMAIL,
                password=SUPERUSER_PASSWORD,
                name="Ada Admin",
            )
        return user

    def _ensure_tour(self, spec: dict, *, guides) -> Tour:
        spec = dict(spec)
        latitude, longitude, address = spec.pop("start")
        stops = spec.pop("stops")
        tour = Tour.all_objects.filter(name=spec["name"]).first()
        if tour is not None:
            return tour

        tour = Tour.all_objects.create(
            start_latitude=latitude,
            start_longitude=longitude,
            start_address=address,
            **spec,
        )
        tour.guides.set(guides)
        TourLocation.objects.bulk_create(
            TourLocation(tour=tour, latitude=lat, longitude=lng, description=label, day=day)
            for lat, lng, label, day in stops
        )
        first_start = (timezone.now() + timedelta(days=30)).replace(hour=8, minute=0, second=0, microsecond=0)
        TourStartDate.objects.bulk_create(
            TourStartDate(tour=tour, starts_at=first_start + timedelta(days=60 * offset)) for offset in range(3)
        )
        self.stdout.write(self.style.NOTICE(f"Created tour {tour.name}"))
        return tour
