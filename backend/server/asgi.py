"""
ASGI entry point for the recorder service.

The .env file is loaded before configuration is read, so local
credentials and browser settings reach AppConfig.
Served by uvicorn (see server.main).
"""

from dotenv import load_dotenv

load_dotenv()

# pylint: disable=wrong-import-position
from config import AppConfig
from server.app import create_app

config = AppConfig.load_from_env()
app = create_app(config)
