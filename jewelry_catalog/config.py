import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def _database_uri():
    database_url = os.getenv('DATABASE_URL')

    if database_url:
        # Render/Supabase hand out postgres:// but SQLAlchemy needs postgresql://
        if database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql://", 1)
        return database_url

    # Local development fallback
    return "sqlite:///" + os.path.join(BASE_DIR, "instance", "app.db")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-key-change-in-production")

    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Gold price feed
    GOLD_PRICE_API_URL = os.getenv("GOLD_PRICE_API_URL", "https://api.gold-api.com/price/XAU")
    GOLD_PRICE_FIELD = os.getenv("GOLD_PRICE_FIELD", "price")
    GOLD_PRICE_TIMEOUT = float(os.getenv("GOLD_PRICE_TIMEOUT", "10"))
    GOLD_PRICE_INTERVAL = float(os.getenv("GOLD_PRICE_INTERVAL", str(24 * 60 * 60)))
    GOLD_PRICE_FALLBACK = float(os.getenv("GOLD_PRICE_FALLBACK", "5450"))
    GOLD_PRICE_POLLING = os.getenv("GOLD_PRICE_POLLING", "true").lower() == "true"


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    GOLD_PRICE_POLLING = False
