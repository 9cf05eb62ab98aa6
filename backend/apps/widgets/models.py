"""
Widgets Domain Models

- WidgetAssignment: the product a widget instance displays

Containers (pages) and products live outside this service, so both are kept
as plain identifiers rather than foreign keys.
"""
from django.db import models


class WidgetAssignment(models.Model):
    """Write-once binding of one claimed product to one widget on one page."""

    key = models.CharField(
        max_length=600,
        verbose_name='Assignment key',
        help_text='assignment:<container_id>:<widget_id> (display only, not unique)'
    )
    container_id = models.CharField(
        max_length=255,
        db_index=True,
        verbose_name='Container (page) id'
    )
    widget_id = models.CharField(
        max_length=255,
        verbose_name='Widget id'
    )
    product_id = models.PositiveBigIntegerField(
        verbose_name='Product id'
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'widgets_assignment'
        verbose_name = 'Widget assignment'
        verbose_name_plural = 'Widget assignments'
        constraints = [
            models.UniqueConstraint(
                fields=['container_id', 'widget_id'],
                name='unique_widget_per_container'
            ),
        ]
        indexes = [
            models.Index(fields=['product_id'], name='widgets_assignment_product_idx'),
        ]
        permissions = [
            ('edit_products', 'Can create store products from the widget editor'),
        ]

    def __str__(self):
        return f'{self.container_id}/{self.widget_id} -> {self.product_id}'
