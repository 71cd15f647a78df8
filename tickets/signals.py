"""Django signals for ticket list cache invalidation."""

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from tickets.models import Ticket
from tickets.services.ticket_service import user_tickets_cache_key


@receiver([post_save, post_delete], sender=Ticket)
def invalidate_user_tickets_cache(sender, instance, **kwargs):
    """Drop the owner's cached ticket list when one of their tickets changes."""
    cache.delete(user_tickets_cache_key(instance.user_id))
