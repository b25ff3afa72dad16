"""
Minimal Django settings for the Stockwatch test suite.
"""

SECRET_KEY = 'stockwatch-tests'
DEBUG = True
USE_TZ = True
TIME_ZONE = 'UTC'

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'stockwatch',
    'testproject.catalog',
]

MIDDLEWARE = [
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
]

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

ROOT_URLCONF = 'testproject.urls'
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

STOCKWATCH = {
    'CRON_SECRET': 'test-secret',
    'AT_RISK_THRESHOLD_DAYS': 60,
    'DEAD_THRESHOLD_DAYS': 90,
    'EXPIRY_WARNING_DAYS': 7,
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {'class': 'logging.StreamHandler'},
    },
    'loggers': {
        'stockwatch': {'handlers': ['console'], 'level': 'WARNING'},
    },
}
