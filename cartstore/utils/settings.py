# cartstore/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CART_STORAGE_KEY = os.getenv("CART_STORAGE_KEY", "@GoMarketplace:products")
REDIS_RETRY_ATTEMPTS = int(os.getenv("REDIS_RETRY_ATTEMPTS", 3))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
