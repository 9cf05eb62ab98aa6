from django.contrib import admin
from .models import WidgetAssignment


@admin.register(WidgetAssignment)
class WidgetAssignmentAdmin(admin.ModelAdmin):
    list_display = ['container_id', 'widget_id', 'product_id', 'created_at']
    list_filter = ['created_at']
    search_fields = ['container_id', 'widget_id', 'product_id']

    # Assignments are write-once
    readonly_fields = ['key', 'container_id', 'widget_id', 'product_id', 'created_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
