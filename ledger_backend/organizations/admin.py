# organizations/admin.py

from django.contrib import admin

from organizations.models import Category, Customer, Organization, Tag, Vendor


# ======================================================
# ORGANIZATION ADMIN
# ======================================================


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active", "created_at")
    search_fields = ("name",)
    list_filter = ("is_active",)


# ======================================================
# COUNTERPARTY ADMIN
# ======================================================


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ("name", "organization", "document", "email", "is_active")
    search_fields = ("name", "document", "email")
    list_filter = ("is_active", "organization")


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "organization", "document", "email", "is_active")
    search_fields = ("name", "document", "email")
    list_filter = ("is_active", "organization")


# ======================================================
# CLASSIFICATION ADMIN
# ======================================================


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "organization", "is_active")
    search_fields = ("name",)
    list_filter = ("type", "is_active", "organization")


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ("name", "color", "organization")
    search_fields = ("name",)
    list_filter = ("organization",)
