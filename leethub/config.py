# leethub/config.py
import os

GITHUB_API = os.getenv("GITHUB_API", "https://api.github.com").rstrip("/")
GITHUB_TIMEOUT = float(os.getenv("GITHUB_TIMEOUT", "30"))

STORE_PATH = os.getenv("LEETHUB_STORE_PATH", "leethub_store.json")

# store keys
TOKEN_KEY = "leethub_token"
STATS_KEY = "stats"
