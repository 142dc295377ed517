"""Django signals driving the document store's push channel."""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from bookings.models import Document
from bookings.stores.django_store import live_collections


@receiver([post_save, post_delete], sender=Document)
def publish_collection_change(sender, instance, **kwargs):
    """Push the changed collection to its subscribers when a document is saved or deleted."""
    for collection in live_collections(instance.collection):
        collection.publish()
