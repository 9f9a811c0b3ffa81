# kvcache/config.py
import os

DATABASE_URL = os.getenv("DATABASE_URL") or "sqlite:///./kvcache.db"

# Cache configuration:
#   CACHE_BACKEND: "database" | "file"
#   CACHE_DIR: root directory (file backend only)
#   CACHE_TTL_SECONDS: lifetime used when store() gets no explicit expiry
#   KEY_HASH_CACHE_CAPACITY: max memoised key hashes per file store
CACHE_BACKEND = os.getenv("CACHE_BACKEND", "database").lower()
CACHE_DIR = os.getenv("CACHE_DIR", "./cache")
CACHE_TTL_SECONDS = int(os.getenv("CACHE_TTL_SECONDS", "7200"))
KEY_HASH_CACHE_CAPACITY = int(os.getenv("KEY_HASH_CACHE_CAPACITY", "10000"))

# Read once at process start; change via environment variables.
GC_INTERVAL_SECONDS = int(os.getenv("GC_INTERVAL_SECONDS", "3600"))  # default 1 hour
