import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Management Tool")

    # Catalog file (whole library serialized as JSON)
    data_file: str = os.getenv("LIBRARY_JSON_FILE", "library.json")

    # Logging settings; the terminal is owned by the UI so logs go to a file
    log_file: str = os.getenv("LIBRARY_LOG_FILE", "library-tui.log")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
