from django.contrib import admin

from .models import Evidence


@admin.register(Evidence)
class EvidenceAdmin(admin.ModelAdmin):
    list_display = ("id", "file_name", "mime_type", "file_size", "complaint", "uploaded_by", "created_at")
    list_filter = ("mime_type",)
    search_fields = ("file_name", "complaint__protocol_number")
    raw_id_fields = ("complaint", "uploaded_by")
    readonly_fields = ("created_at", "updated_at")
