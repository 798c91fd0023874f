# address_suggest/_singletons.py
from functools import lru_cache
from .ban_client import BanClient
from .communes import load_communes

@lru_cache(maxsize=1)
def get_directory():
    return load_communes()

@lru_cache(maxsize=1)
def get_ban_client():
    # one pooled httpx client for the whole process
    return BanClient()
