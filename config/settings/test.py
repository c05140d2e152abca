from .base import *

DEBUG = False
SECRET_KEY = "test-secret-key"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

NAVIGATION_DEFAULT_PAGE_SIZE = 20
NAVIGATION_MAX_PAGE_SIZE = 50
NAVIGATION_MAX_TREE_DEPTH = 5
