"""
Test settings: SQLite, fake infrastructure, pytest owns logging.
"""
from .base import *

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

USE_FAKES = True
RABBITMQ_URL = ''
CONFIGURE_LOGGING = False

WOOCOMMERCE_URL = 'http://shop.test'

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
