"""
Django settings for the BloodAid backend.

Everything deployment-specific comes from the environment; a ``.env`` file
next to ``manage.py`` is loaded first when present.
"""
import os
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / '.env')


def env_bool(name, default=False):
    return os.environ.get(name, str(default)).strip().lower() in ('1', 'true', 'yes', 'on')


def env_list(name, default=''):
    return [item.strip() for item in os.environ.get(name, default).split(',') if item.strip()]


SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-bloodaid-development-key')
DEBUG = env_bool('DJANGO_DEBUG', False)
ALLOWED_HOSTS = env_list('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'corsheaders',
    'rest_framework',
    'bloodaid',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'bloodaid_server.urls'
WSGI_APPLICATION = 'bloodaid_server.wsgi.application'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
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
        'NAME': os.environ.get('DATABASE_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

# CORS: the single front-end origin, or everyone while it is unset
CLIENT_DOMAIN = os.environ.get('CLIENT_DOMAIN', '')
if CLIENT_DOMAIN:
    CORS_ALLOWED_ORIGINS = env_list('CLIENT_DOMAIN')
    CORS_ALLOW_CREDENTIALS = True
else:
    CORS_ALLOW_ALL_ORIGINS = True

# -------------------------------
# Identity provider
# -------------------------------
# "jwt": verify bearer tokens with simplejwt (optionally against a JWK set)
# "firebase": verify Firebase ID tokens with firebase-admin
IDENTITY_BACKEND = os.environ.get('IDENTITY_BACKEND', 'jwt')
IDENTITY_EMAIL_CLAIM = os.environ.get('IDENTITY_EMAIL_CLAIM', 'email')
FIREBASE_SERVICE_KEY = os.environ.get('FIREBASE_SERVICE_KEY', '')

IDENTITY_AUTHENTICATION_CLASSES = {
    'jwt': 'bloodaid.authentication.BearerTokenAuthentication',
    'firebase': 'bloodaid.authentication.FirebaseAuthentication',
}

IDENTITY_JWK_URL = os.environ.get('IDENTITY_JWK_URL') or None

SIMPLE_JWT = {
    'ALGORITHM': os.environ.get('IDENTITY_JWT_ALGORITHM', 'RS256' if IDENTITY_JWK_URL else 'HS256'),
    'SIGNING_KEY': SECRET_KEY,
    'VERIFYING_KEY': os.environ.get('IDENTITY_VERIFYING_KEY') or None,
    'JWK_URL': IDENTITY_JWK_URL,
    'AUDIENCE': os.environ.get('IDENTITY_AUDIENCE') or None,
    'ISSUER': os.environ.get('IDENTITY_ISSUER') or None,
    'LEEWAY': timedelta(seconds=int(os.environ.get('IDENTITY_LEEWAY_SECONDS', '0'))),
    'AUTH_HEADER_TYPES': ('Bearer',),
    'ACCESS_TOKEN_LIFETIME': timedelta(hours=1),
    'UPDATE_LAST_LOGIN': False,
}
if IDENTITY_JWK_URL:
    # third-party ID tokens carry neither a token type nor a jti
    SIMPLE_JWT.update({'TOKEN_TYPE_CLAIM': None, 'JTI_CLAIM': None})

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [IDENTITY_AUTHENTICATION_CLASSES[IDENTITY_BACKEND]],
    'DEFAULT_PERMISSION_CLASSES': ['rest_framework.permissions.IsAuthenticated'],
    'DEFAULT_PAGINATION_CLASS': 'rest_framework.pagination.PageNumberPagination',
    'PAGE_SIZE': int(os.environ.get('PAGE_SIZE', '10')),
    'EXCEPTION_HANDLER': 'bloodaid.handlers.api_exception_handler',
}

# -------------------------------
# Payment gateway
# -------------------------------
PAYMENT_GATEWAY = os.environ.get('PAYMENT_GATEWAY', 'bloodaid.payments.StripeCheckoutGateway')
STRIPE_SECRET_KEY = os.environ.get('STRIPE_SECRET_KEY', '')
PAYMENT_CURRENCY = os.environ.get('PAYMENT_CURRENCY', 'usd')
PAYMENT_SUCCESS_URL = os.environ.get(
    'PAYMENT_SUCCESS_URL', 'http://localhost:5173/funding/success?session_id={CHECKOUT_SESSION_ID}'
)
PAYMENT_CANCEL_URL = os.environ.get('PAYMENT_CANCEL_URL', 'http://localhost:5173/funding')
PAYMENT_GATEWAY_TIMEOUT = float(os.environ.get('PAYMENT_GATEWAY_TIMEOUT', '10'))

# -------------------------------
# Logging
# -------------------------------
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s %(levelname)s [%(name)s] %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'bloodaid': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}
