"""
Development settings.
"""
from .base import *

DEBUG = True

ALLOWED_HOSTS = ['*']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': 'widget_claims',
        'USER': 'widget_claims',
        'PASSWORD': 'widget_claims',
        'HOST': 'db',
        'PORT': '5432',
    }
}
STATIC_ROOT = os.getenv("STATIC_ROOT", os.path.join(BASE_DIR, "staticfiles"))

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')
