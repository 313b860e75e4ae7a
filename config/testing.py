from .config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"
# HS256 keys shorter than 32 bytes trigger PyJWT's InsecureKeyLengthWarning
JWT_SECRET = "test-jwt-secret-0123456789abcdef0123"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False

WINDOW_REFERENCE_DAY = "now"
BULK_WINDOW_CHECK = False
