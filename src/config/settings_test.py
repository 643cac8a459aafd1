"""
Settings para a suíte de testes.

SQLite em memória, Celery síncrono e e-mail em memória
(django.core.mail.outbox).
"""

from .settings import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
DEFAULT_FROM_EMAIL = 'suporte@test.local'

CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

EVENT_PUBLISHER_MODE = 'celery'

CLOUDINARY_CLOUD_NAME = 'test-cloud'
CLOUDINARY_API_KEY = 'test-key'
CLOUDINARY_API_SECRET = 'test-secret'

ORDERS_API_URL = ''

ATTACHMENT_UPLOAD_MAX_WORKERS = 4

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'null': {'class': 'logging.NullHandler'},
    },
    'root': {
        'handlers': ['null'],
        'level': 'WARNING',
    },
}
