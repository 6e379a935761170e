"""
Application configuration settings loaded from config.yaml
"""
import os
import yaml
from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, field_validator


class DatabasePoolConfig(BaseModel):
    """Database connection pool configuration"""
    size: int = 10  # Number of connections to maintain
    max_overflow: int = 20  # Maximum overflow connections
    timeout: int = 30  # Seconds to wait for a connection
    recycle: int = 3600  # Seconds before recycling a connection
    echo: bool = False  # Log SQL queries


class DatabaseConfig(BaseModel):
    """Database configuration"""
    url: str = "sqlite:///./leaddesk.db"
    pool: DatabasePoolConfig = DatabasePoolConfig()

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class StoreConfig(BaseModel):
    """Which backend the import pipeline and lead services write to"""
    type: str = "db"  # "db" or "supabase"

    @field_validator("type")
    @classmethod
    def check_type(cls, v: str) -> str:
        v = v.lower()
        if v not in ("db", "supabase"):
            raise ValueError(f"Unsupported store type: {v}")
        return v


class SupabaseConfig(BaseModel):
    """Hosted backend (PostgREST) configuration"""
    url: str
    api_key: Optional[str] = None
    db_schema: str = "public"  # Sent as Accept-Profile/Content-Profile
    timeout: int = 30


class ImporterConfig(BaseModel):
    """CSV import defaults"""
    category_column: str = "query"
    default_status: str = "Fresh Lead"
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB


class SecurityConfig(BaseModel):
    """Security configuration"""
    api_key: Optional[str] = None  # Required in X-API-Key for mutating endpoints when set


class Settings(BaseModel):
    """Application settings loaded from config.yaml"""

    # Project settings
    project_name: str = "Leaddesk API"
    version: str = "1.0.0"
    description: str = "Lead management backend: CSV imports, categories, lead tracking and analytics"
    api_v1_str: str = "/api/v1"

    # Database settings
    database: DatabaseConfig = DatabaseConfig()

    @property
    def DATABASE_URL(self) -> str:
        """Database URL shortcut"""
        return self.database.url

    # Store selection
    store: StoreConfig = StoreConfig()

    # Hosted backend settings (only for store.type == "supabase")
    supabase: Optional[SupabaseConfig] = None

    # Import settings
    importer: ImporterConfig = ImporterConfig()

    # CORS settings
    backend_cors_origins: List[str] = []

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, list):
            return v
        return []

    # Security settings
    security: SecurityConfig = SecurityConfig()

    # Logging
    log_level: str = "INFO"


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config.yaml file. If None, looks for it in:
                    1. The LEADDESK_CONFIG environment variable
                    2. Current directory
                    3. Project root (src/../config.yaml)

    Returns:
        Settings: Loaded and validated settings
    """
    if config_path is None:
        config_path = os.environ.get("LEADDESK_CONFIG")

    if config_path is None:
        current_dir = Path.cwd() / "config.yaml"
        if current_dir.exists():
            config_path = str(current_dir)
        else:
            # Project root, assuming we're in src/leaddesk/core/
            project_root = Path(__file__).parent.parent.parent.parent / "config.yaml"
            if project_root.exists():
                config_path = str(project_root)
            else:
                raise FileNotFoundError(
                    "config.yaml not found. Please create config.yaml in the project root."
                )

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_file, "r") as f:
        config_data = yaml.safe_load(f)

    if config_data is None:
        raise ValueError("Configuration file is empty or invalid")

    return Settings(**config_data)


# Load settings on module import
settings = load_config()
