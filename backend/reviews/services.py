from __future__ import annotations

from django.db import transaction

from core.exceptions import ValidationError

from .models import Review
from .signals import ratings_changed

DUPLICATE_REVIEW_MESSAGE = "You have already reviewed this tour."


def _notify(tour_id: int):
    ratings_changed.send(sender=Review, tour_id=tour_id)


@transaction.atomic
def create_review(*, tour, user, review: str, rating: int) -> Review:
    if Review.objects.filter(tour=tour, user=user).exists():
        raise ValidationError(DUPLICATE_REVIEW_MESSAGE)
    instance = Review.objects.create(tour=tour, user=user, review=review, rating=rating)
    _notify(tour.pk)
    return instance


@transaction.atomic
def update_review(instance: Review, **changes) -> Review:
    previous_tour_id = instance.tour_id
    for field, value in changes.items():
        setattr(instance, field, value)
    if (
        instance.tour_id != previous_tour_id
        and Review.objects.filter(tour_id=instance.tour_id, user_id=instance.user_id).exists()
    ):
        raise ValidationError(DUPLICATE_REVIEW_MESSAGE)
    instance.save()
    _notify(instance.tour_id)
    if instance.tour_id != previous_tour_id:
        _notify(previous_tour_id)
    return instance


@transaction.atomic
def delete_review(instance: Review):
    tour_id = instance.tour_id
    instance.delete()
    _notify(tour_id)
