from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='WidgetAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(help_text='assignment:<container_id>:<widget_id> (display only, not unique)', max_length=600, verbose_name='Assignment key')),
                ('container_id', models.CharField(db_index=True, max_length=255, verbose_name='Container (page) id')),
                ('widget_id', models.CharField(max_length=255, verbose_name='Widget id')),
                ('product_id', models.PositiveBigIntegerField(verbose_name='Product id')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Widget assignment',
                'verbose_name_plural': 'Widget assignments',
                'db_table': 'widgets_assignment',
                'permissions': [('edit_products', 'Can create store products from the widget editor')],
                'indexes': [models.Index(fields=['product_id'], name='widgets_assignment_product_idx')],
                'constraints': [models.UniqueConstraint(fields=('container_id', 'widget_id'), name='unique_widget_per_container')],
            },
        ),
    ]
