import logging

from django.db.models import Avg, Count
from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

DEFAULT_RATINGS_AVERAGE = 4.5

# Sent with ``tour_id`` whenever a review for that tour is created, edited or removed.
ratings_changed = Signal()


@receiver(ratings_changed)
def recalculate_tour_ratings(sender, tour_id, **kwargs):
    from reviews.models import Review
    from tours.models import Tour

    stats = Review.objects.filter(tour_id=tour_id).aggregate(quantity=Count("id"), average=Avg("rating"))
    if stats["quantity"]:
        quantity, average = stats["quantity"], round(stats["average"], 1)
    else:
        quantity, average = 0, DEFAULT_RATINGS_AVERAGE

    Tour.all_objects.filter(pk=tour_id).update(ratings_quantity=quantity, ratings_average=average)
    logger.debug("Tour %s ratings now %s from %s reviews", tour_id, average, quantity)
