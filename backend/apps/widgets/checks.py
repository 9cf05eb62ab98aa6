"""
Startup checks for the external store the widgets depend on.
"""
from django.conf import settings
from django.core.checks import Warning, register

STORE_SETTINGS = (
    'WOOCOMMERCE_URL',
    'WOOCOMMERCE_CONSUMER_KEY',
    'WOOCOMMERCE_CONSUMER_SECRET',
)


@register()
def check_storefront_configured(app_configs, **kwargs):
    if getattr(settings, 'USE_FAKES', False):
        return []

    missing = [name for name in STORE_SETTINGS if not getattr(settings, name, '')]
    if not missing:
        return []

    return [
        Warning(
            'Product creation requires WooCommerce to be configured.',
            hint=f"Set {', '.join(missing)}.",
            id='widgets.W001',
        )
    ]
