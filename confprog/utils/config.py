"""Configuration management for the conference program importer."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


@dataclass
class DatabaseConfig:
    """Database configuration."""

    postgres_host: str = os.getenv("POSTGRES_HOST", "localhost")
    postgres_port: int = int(os.getenv("POSTGRES_PORT", "5432"))
    postgres_database: str = os.getenv("POSTGRES_DATABASE", "conference")
    postgres_user: str = os.getenv("POSTGRES_USER", "postgres")
    postgres_password: str = os.getenv("POSTGRES_PASSWORD", "postgres")


@dataclass
class GeminiConfig:
    """Gemini configuration for the schedule validator."""

    api_key: str = os.getenv("GOOGLE_API_KEY", "")
    model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    max_attempts: int = int(os.getenv("GEMINI_MAX_ATTEMPTS", "3"))


@dataclass
class ImportConfig:
    """Program import configuration."""

    batch_size: int = int(os.getenv("IMPORT_BATCH_SIZE", "100"))
    # Prefixed to bare 10-digit phone numbers.
    phone_country_code: str = os.getenv("IMPORT_PHONE_COUNTRY_CODE", "+91")


@dataclass
class AppConfig:
    """Application configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    importing: ImportConfig = field(default_factory=ImportConfig)


config = AppConfig()
