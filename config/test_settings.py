from .settings import *  # noqa: F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

SECRET_KEY = 'test-secret-key'
DONATION_INITIAL_STATUS = 'Completed'
DONATION_STRICT_TRANSITIONS = False
EXPOSE_ERROR_DETAILS = True
ID_TENANT_TAG = '33'
ID_MAX_ATTEMPTS = 5
