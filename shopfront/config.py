# shopfront/config.py
import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent

class Config:
    """Configuration settings for the bot"""
    
    # Bot settings
    TELEGRAM_TOKEN: str = os.getenv("TELEGRAM_TOKEN", "")
    
    # Backend settings
    API_BASE_URL: str = os.getenv("API_BASE_URL", "").rstrip("/")
    PUSH_URL: str = os.getenv("PUSH_URL", "")
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))
    
    # Order dashboard settings
    ORDER_REFRESH_INTERVAL: int = int(os.getenv("ORDER_REFRESH_INTERVAL", "30"))
    CHANNEL_RECONNECT_DELAY: int = int(os.getenv("CHANNEL_RECONNECT_DELAY", "5"))
    
    # Payment proof settings
    MAX_PROOF_IMAGE_SIZE: int = int(os.getenv("MAX_PROOF_IMAGE_SIZE", str(10 * 1024 * 1024)))
    
    # Other settings
    CURRENCY: str = os.getenv("CURRENCY", "Rs")
    TIMEZONE: str = os.getenv("TZ", "Asia/Karachi")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    
    # Paths
    LOG_DIR = BASE_DIR / "logs"

    @classmethod
    def validate(cls):
        """Fail fast on missing required settings"""
        if not cls.TELEGRAM_TOKEN:
            raise ValueError("No TELEGRAM_TOKEN set in environment")
        if not cls.API_BASE_URL:
            raise ValueError("No API_BASE_URL set in environment")

def setup_logging():
    """Configure logging settings"""
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    Config.LOG_DIR.mkdir(exist_ok=True)
    log_file = Config.LOG_DIR / "bot.log"
    
    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL),
        format=log_format,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )
    # httpx request lines from python-telegram-bot are noisy at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
