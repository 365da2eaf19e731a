import os
from pydantic import BaseModel, Field
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseModel):
    app_env: str = Field(default=os.getenv("APP_ENV", "dev"))
    data_dir: str = Field(default=os.getenv("DATA_DIR", "./storage_data"))
    records_file: str = Field(default=os.getenv("RECORDS_FILE", "records_index.json"))
    log_level: str = Field(default=os.getenv("LOG_LEVEL", "INFO"))
    messages_file: str = Field(default=os.getenv("MESSAGES_FILE", ""))

    # Admin surface
    admin_base_path: str = Field(default=os.getenv("ADMIN_BASE_PATH", "/admin/records"))
    site_title: str = Field(default=os.getenv("SITE_TITLE", "Record History"))

    # LangSmith
    langsmith_api_key: str = Field(default=os.getenv("LANGSMITH_API_KEY", ""))
    langsmith_project: str = Field(default=os.getenv("LANGSMITH_PROJECT", "record-history"))
    langsmith_tracing: bool = Field(default=os.getenv("LANGSMITH_TRACING", "0") == "1")

settings = Settings()
os.makedirs(settings.data_dir, exist_ok=True)
