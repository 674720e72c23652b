from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
SCHEDULER_ENABLED = False
CACHE_TTL_SECONDS = {"byLeader": 0, "byDateRange": 0, "justifications": 0}
