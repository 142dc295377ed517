from django.contrib import admin

from bookings.models import Document


@admin.register(Document)
class DocumentAdmin(admin.ModelAdmin):
    list_display = ["doc_id", "collection", "created_at", "updated_at"]
    list_filter = ["collection"]
    search_fields = ["doc_id"]
    readonly_fields = ["doc_id", "created_at", "updated_at"]
