import os
from dotenv import load_dotenv

load_dotenv()
APP_ENV = os.getenv("APP_ENV", "dev").lower()
DB_NAME = os.getenv("DB_NAME", "issue_tracker")
MONGO_URL_DEV = os.getenv("MONGO_URL_DEV", "mongodb://localhost:27017")
_raw_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
origins = [origin.strip() for origin in _raw_origins.split(",") if origin.strip()]
SSE_PING_INTERVAL = float(os.getenv("SSE_PING_INTERVAL", "15"))
EVENT_QUEUE_SIZE = int(os.getenv("EVENT_QUEUE_SIZE", "100"))
PORT = int(os.getenv("PORT", "5000"))
