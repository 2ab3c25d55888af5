"""Configuration management for the Recipe Grocery Helper service."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'

# Backends: "memory" keeps everything in process, "firebase" talks to the real project
STORE_BACKEND: Final[str] = os.getenv('STORE_BACKEND', 'memory').lower()
AUTH_MODE: Final[str] = os.getenv('AUTH_MODE', 'dev').lower()

# Firebase
FIREBASE_CREDENTIALS: Final[str] = os.getenv('FIREBASE_CREDENTIALS', '')
FIREBASE_DATABASE_URL: Final[str] = os.getenv('FIREBASE_DATABASE_URL', '')
FIREBASE_STORAGE_BUCKET: Final[str] = os.getenv('FIREBASE_STORAGE_BUCKET', '')
STORE_WORKERS: Final[int] = int(os.getenv('STORE_WORKERS', '4'))
SNAPSHOT_WAIT_SECONDS: Final[float] = float(os.getenv('SNAPSHOT_WAIT_SECONDS', '5'))

# Third-party HTTP APIs
MEALDB_BASE_URL: Final[str] = os.getenv('MEALDB_BASE_URL', 'https://www.themealdb.com/api/json/v1/1/')
GOOGLE_MAPS_API_KEY: Final[str] = os.getenv('GOOGLE_MAPS_API_KEY', '')
PLACES_BASE_URL: Final[str] = os.getenv('PLACES_BASE_URL', 'https://places.googleapis.com/v1/')
HTTP_TIMEOUT: Final[float] = float(os.getenv('HTTP_TIMEOUT', '10'))

# Nearby store search
NEARBY_RADIUS_M: Final[float] = float(os.getenv('NEARBY_RADIUS_M', '2000'))
NEARBY_MAX_RESULTS: Final[int] = int(os.getenv('NEARBY_MAX_RESULTS', '20'))
