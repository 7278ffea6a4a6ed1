from pathlib import Path
from decouple import config
import logging

BASE_DIR = Path(__file__).resolve().parent.parent

LOGS_DIR = BASE_DIR / 'logs'
LOGS_DIR.mkdir(exist_ok=True)

SECRET_KEY = config('SECRET_KEY', default='django-insecure-change-in-production')

DEBUG = config('DEBUG', default=True, cast=bool)

allowed_hosts_env = config('ALLOWED_HOSTS', default=None)
if allowed_hosts_env:
    ALLOWED_HOSTS = [host.strip() for host in allowed_hosts_env.split(',')]
elif not DEBUG:
    ALLOWED_HOSTS = ['*']
else:
    ALLOWED_HOSTS = ['localhost', '127.0.0.1', 'testserver']

INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.staticfiles',
    'rest_framework',
    'corsheaders',
    'drf_spectacular',
    'apps.domain',
    'apps.application',
    'apps.infrastructure',
    'apps.presentation',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'rmn_analyst.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
            ],
        },
    },
]

WSGI_APPLICATION = 'rmn_analyst.wsgi.application'

# Analyses live in the cache store, the database only backs Django's own apps
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': BASE_DIR / 'db.sqlite3',
    }
}

LANGUAGE_CODE = 'en-us'

TIME_ZONE = 'UTC'

USE_I18N = True

USE_TZ = True

STATIC_URL = 'static/'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Uploaded report text is posted inline as JSON
DATA_UPLOAD_MAX_MEMORY_SIZE = config('DATA_UPLOAD_MAX_MEMORY_SIZE', default=50 * 1024 * 1024, cast=int)
FILE_UPLOAD_MAX_MEMORY_SIZE = DATA_UPLOAD_MAX_MEMORY_SIZE

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
    ],
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
}

CORS_ALLOW_ALL_ORIGINS = True
CORS_ALLOW_CREDENTIALS = True

logger = logging.getLogger(__name__)
logger.info('CORS_ALLOW_ALL_ORIGINS = True')

CORS_ALLOW_METHODS = [
    'GET',
    'OPTIONS',
    'POST',
]
CORS_ALLOW_HEADERS = [
    'accept',
    'accept-encoding',
    'content-type',
    'dnt',
    'origin',
    'user-agent',
    'x-requested-with',
]
CORS_PREFLIGHT_MAX_AGE = 86400

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'file': {
            'level': 'INFO',
            'class': 'logging.FileHandler',
            'filename': BASE_DIR / 'logs' / 'django.log',
            'formatter': 'verbose',
        },
        'console': {
            'level': 'DEBUG',
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console', 'file'],
        'level': 'INFO',
    },
    'loggers': {
        'django': {
            'handlers': ['console', 'file'],
            'level': 'INFO',
            'propagate': False,
        },
        'apps': {
            'handlers': ['console', 'file'],
            'level': 'DEBUG',
            'propagate': False,
        },
    },
}

# Google Gemini API Configuration
GEMINI_API_KEY = config('GEMINI_API_KEY', default=None)
GEMINI_MODEL = config('GEMINI_MODEL', default='gemini-2.5-flash')
GEMINI_TEMPERATURE = config('GEMINI_TEMPERATURE', default=0.2, cast=float)
GEMINI_MAX_OUTPUT_TOKENS = config('GEMINI_MAX_OUTPUT_TOKENS', default=8192, cast=int)
GEMINI_TIMEOUT = config('GEMINI_TIMEOUT', default=120, cast=int)

# Report analysis configuration
RETAIL_MEDIA_NETWORK = config('RETAIL_MEDIA_NETWORK', default='Petco')
ANALYSIS_CACHE_TTL = config('ANALYSIS_CACHE_TTL', default=60 * 60 * 24 * 7, cast=int)

# Analysis cache: Redis when configured, in-process memory otherwise
REDIS_URL = config('REDIS_URL', default=None)

# Swagger/OpenAPI Configuration
SPECTACULAR_SETTINGS = {
    'TITLE': 'RMN Report Analyst API',
    'DESCRIPTION': '''
    API for AI-assisted analysis of retail media network performance reports.

    ## Main features

    - **Report analysis**: Upload extracted report text and receive a structured analysis
      (executive summary, KPI highlights and trends, top/bottom performers, recommendations)
    - **Grounding**: Output is restricted to the vocabulary found in the uploaded reports
    - **Caching**: Identical inputs are served from cache and can be retrieved by `cacheId`

    ## HTTP status codes

    - `200 OK`: Analysis produced or retrieved
    - `400 Bad Request`: Invalid input (missing or empty `fileContents`)
    - `404 Not Found`: No stored analysis for the given `cacheId`
    - `422 Unprocessable Entity`: The model could not produce an analysis grounded in the uploaded reports
    - `500 Internal Server Error`: Model call or unexpected failure
    ''',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
    'TAGS': [
        {'name': 'Analysis', 'description': 'Report analysis and retrieval of stored analyses'},
        {'name': 'Health', 'description': 'API health checks'},
    ],
    'SERVERS': [
        {'url': 'http://localhost:8000', 'description': 'Development server'},
    ],
    'SCHEMA_PATH_PREFIX': '/api/',
    'COMPONENT_SPLIT_REQUEST': True,
    'SWAGGER_UI_SETTINGS': {
        'deepLinking': True,
        'displayRequestDuration': True,
        'docExpansion': 'list',
        'filter': True,
    },
}
