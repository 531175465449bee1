from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("email", "full_name", "bi_number", "phone", "role", "is_active")
    search_fields = ("email", "full_name", "bi_number", "phone")
    list_filter = ("role", "is_active", "is_staff")
    ordering = ("email",)
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Identity", {"fields": ("full_name", "phone", "bi_number", "role")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Identity", {"fields": ("email", "full_name", "phone", "bi_number", "role")}),
    )
