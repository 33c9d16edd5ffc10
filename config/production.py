import os

from .config import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
EMAIL_BACKEND = os.getenv("EMAIL_BACKEND", "smtp").strip().lower()
CHANGE_FEED = os.getenv("CHANGE_FEED", "poll").strip().lower()

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
