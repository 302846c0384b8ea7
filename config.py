#!/usr/bin/env python3
"""
Configuration module for the Creator/Brand Search API.
Loads environment variables and provides default values.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load .env file if it exists
env_path = Path(__file__).parent / '.env'
if env_path.exists():
    load_dotenv(env_path)
    print(f"📄 Loaded environment from {env_path}")


def get_int_env(key: str, default: int) -> int:
    """Get integer environment variable."""
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def get_float_env(key: str, default: float) -> float:
    """Get float environment variable."""
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def get_str_env(*keys: str) -> Optional[str]:
    """Get the first non-empty string variable among several names."""
    for key in keys:
        value = os.getenv(key)
        if value:
            return value.strip()
    return None


def get_list_env(key: str, default: str) -> List[str]:
    """Get comma-separated list environment variable."""
    return [item.strip() for item in os.getenv(key, default).split(',') if item.strip()]


class Config:
    """Configuration class for the search proxy.

    Values are read from the environment when the instance is created, so a
    fresh ``Config()`` picks up the current process environment.
    """

    def __init__(self):
        # === TWELVE LABS CONFIGURATION ===
        self.TWELVELABS_API_KEY = get_str_env('TWELVELABS_API_KEY')
        self.TWELVELABS_API_BASE_URL = get_str_env('TWELVELABS_API_BASE_URL')
        self.BRAND_INDEX_ID = get_str_env('BRAND_INDEX_ID', 'NEXT_PUBLIC_BRAND_INDEX_ID')
        self.CREATOR_INDEX_ID = get_str_env('CREATOR_INDEX_ID', 'NEXT_PUBLIC_CREATOR_INDEX_ID')
        self.UPSTREAM_TIMEOUT = get_float_env('UPSTREAM_TIMEOUT', 30.0)

        # === SEARCH CONFIGURATION ===
        self.SEARCH_MAX_RETRIES = get_int_env('SEARCH_MAX_RETRIES', 2)
        self.SEARCH_RETRY_DELAY = get_float_env('SEARCH_RETRY_DELAY', 1.0)
        self.SEARCH_PAGE_LIMIT = get_int_env('SEARCH_PAGE_LIMIT', 12)

        # === VIDEO LISTING ===
        self.VIDEOS_MAX_LIMIT = get_int_env('VIDEOS_MAX_LIMIT', 50)

        # === API CONFIGURATION ===
        self.API_HOST = os.getenv('API_HOST', '127.0.0.1')
        self.API_PORT = get_int_env('API_PORT', 8000)
        self.API_WORKERS = get_int_env('API_WORKERS', 1)
        self.CORS_ORIGINS = get_list_env('CORS_ORIGINS', '*')

    @property
    def base_url(self) -> Optional[str]:
        """Upstream base URL without a trailing slash."""
        if not self.TWELVELABS_API_BASE_URL:
            return None
        return self.TWELVELABS_API_BASE_URL.rstrip('/')

    @property
    def has_credentials(self) -> bool:
        return bool(self.TWELVELABS_API_KEY and self.TWELVELABS_API_BASE_URL)

    def print_config(self):
        """Print current configuration (without sensitive data)."""
        print("🔧 Search API Configuration:")
        print(f"   Twelve Labs Base URL: {self.TWELVELABS_API_BASE_URL or '(not set)'}")
        print(f"   Twelve Labs API Key: {'set' if self.TWELVELABS_API_KEY else '(not set)'}")
        print(f"   Brand Index: {self.BRAND_INDEX_ID or '(not set)'}")
        print(f"   Creator Index: {self.CREATOR_INDEX_ID or '(not set)'}")
        print(f"   Upstream Timeout: {self.UPSTREAM_TIMEOUT}s")
        print(f"   Search Retries: {self.SEARCH_MAX_RETRIES} (base delay {self.SEARCH_RETRY_DELAY}s)")
        print(f"   Default Page Limit: {self.SEARCH_PAGE_LIMIT}")
        print(f"   Videos Max Limit: {self.VIDEOS_MAX_LIMIT}")
        print(f"   API Host: {self.API_HOST}")
        print(f"   API Port: {self.API_PORT}")
        print(f"   API Workers: {self.API_WORKERS}")
        print(f"   CORS Origins: {', '.join(self.CORS_ORIGINS)}")


# Global config instance
config = Config()

if __name__ == "__main__":
    config.print_config()
