from pathlib import Path
import os
BASE_DIR = Path(__file__).resolve().parent.parent
from dotenv import load_dotenv
load_dotenv()
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "django-insecure-dive-control-local-only")

DEBUG = os.getenv("DJANGO_DEBUG", "false").lower() == "true"

ALLOWED_HOSTS = [h for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h]


# Application definition

INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'channels',
    'rest_framework',
    'corsheaders',
    'crash',
]


MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
]

ROOT_URLCONF = 'divecontrol.urls'

ASGI_APPLICATION = 'divecontrol.asgi.application'

# Each websocket owns its own engine, so the in-memory layer is enough
CHANNEL_LAYERS = {
    "default": {
        "BACKEND": "channels.layers.InMemoryChannelLayer",
    },
}

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}


CORS_ALLOWED_ORIGINS = [o for o in os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173").split(",") if o]

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'UNAUTHENTICATED_USER': None,
}


# Dive engine. Keys override crash.conf.EngineConfig defaults.
DIVE_ENGINE = {
    "initial_balance": os.getenv("DIVE_INITIAL_BALANCE", "1000"),
    "start_on_bet": os.getenv("DIVE_START_ON_BET", "true"),
    "launch_delay": os.getenv("DIVE_LAUNCH_DELAY", "5"),
    "betting_window": os.getenv("DIVE_BETTING_WINDOW", "7"),
    "post_round_delay": os.getenv("DIVE_POST_ROUND_DELAY", "4"),
    "tick_interval": os.getenv("DIVE_TICK_INTERVAL", "0.05"),
    "curve_target_seconds": os.getenv("DIVE_CURVE_TARGET_SECONDS", "8"),
}


LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "crash": {
            "handlers": ["console"],
            "level": os.getenv("DIVE_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}


# Internationalization
# https://docs.djangoproject.com/en/5.2/topics/i18n/

LANGUAGE_CODE = 'en-us'

TIME_ZONE = 'UTC'

USE_I18N = True

USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'
