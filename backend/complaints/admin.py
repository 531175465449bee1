from django.contrib import admin

from .models import (
    Complaint,
    ComplaintUpdate,
    ProtocolSequence,
)
from .registry import all_handlers, get_handler


class ComplaintUpdateInline(admin.TabularInline):
    model = ComplaintUpdate
    extra = 0
    can_delete = False
    fields = ("created_at", "status", "description", "is_public", "updated_by")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


def _detail_inline(detail_model):
    return type(
        f"{detail_model.__name__}Inline",
        (admin.StackedInline,),
        {"model": detail_model, "extra": 0, "can_delete": False, "max_num": 1},
    )


DETAIL_INLINES = {
    handler.detail_model: _detail_inline(handler.detail_model)
    for handler in all_handlers()
}


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ("protocol_number", "complaint_type", "status", "is_anonymous",
                    "investigator", "created_at")
    list_filter = ("complaint_type", "status", "is_anonymous")
    search_fields = ("protocol_number", "location")
    readonly_fields = ("protocol_number", "complaint_type", "status", "created_at", "updated_at")
    raw_id_fields = ("reporter_user", "investigator")
    inlines = [ComplaintUpdateInline]

    def get_inlines(self, request, obj):
        # only the detail table that matches the complaint's type
        if obj is None:
            return self.inlines
        return [DETAIL_INLINES[get_handler(obj.complaint_type).detail_model], *self.inlines]


@admin.register(ProtocolSequence)
class ProtocolSequenceAdmin(admin.ModelAdmin):
    list_display = ("day", "last_value")
    ordering = ("-day",)
