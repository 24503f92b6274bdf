import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Tour",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50, unique=True, validators=[django.core.validators.MinLengthValidator(5)])),
                ("slug", models.SlugField(blank=True, max_length=60)),
                ("duration", models.PositiveIntegerField(help_text="Length of the tour in days.")),
                ("max_group_size", models.PositiveIntegerField()),
                ("difficulty", models.CharField(choices=[("easy", "Easy"), ("medium", "Medium"), ("difficult", "Difficult")], max_length=20)),
                ("ratings_average", models.FloatField(default=4.5, validators=[django.core.validators.MinValueValidator(1.0), django.core.validators.MaxValueValidator(5.0)])),
                ("ratings_quantity", models.PositiveIntegerField(default=0)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("price_discount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("summary", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("image_cover", models.CharField(max_length=255)),
                ("images", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("secret_tour", models.BooleanField(default=False)),
                ("start_latitude", models.FloatField(blank=True, null=True)),
                ("start_longitude", models.FloatField(blank=True, null=True)),
                ("start_address", models.CharField(blank=True, max_length=255)),
                ("start_description", models.CharField(blank=True, max_length=255)),
                ("guides", models.ManyToManyField(blank=True, related_name="guided_tours", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "base_manager_name": "all_objects",
                "indexes": [
                    models.Index(fields=["price", "-ratings_average"], name="tours_price_rating_idx"),
                    models.Index(fields=["slug"], name="tours_slug_idx"),
                ],
            },
            managers=[
                ("all_objects", models.Manager()),
            ],
        ),
        migrations.CreateModel(
            name="TourLocation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("latitude", models.FloatField()),
                ("longitude", models.FloatField()),
                ("address", models.CharField(blank=True, max_length=255)),
                ("description", models.CharField(blank=True, max_length=255)),
                ("day", models.PositiveIntegerField(default=1)),
                ("tour", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="locations", to="tours.tour")),
            ],
            options={
                "ordering": ("day", "id"),
            },
        ),
        migrations.CreateModel(
            name="TourStartDate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("starts_at", models.DateTimeField()),
                ("tour", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="start_dates", to="tours.tour")),
            ],
            options={
                "ordering": ("starts_at",),
            },
        ),
    ]
