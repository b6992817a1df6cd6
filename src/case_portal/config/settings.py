"""
Case Portal Settings

Configuration management using Pydantic settings with environment variable support.
"""

from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Case Portal configuration"""

    # Service Configuration
    service_name: str = Field(default="mp-case-portal", description="Service name")
    environment: str = Field(default="development", description="Environment (development, production)")
    port: int = Field(default=8005, description="Service port")
    host: str = Field(default="0.0.0.0", description="Service host")
    log_level: str = Field(default="INFO", description="Root log level")

    # Remote Missing-Persons API
    api_base_url: str = Field(
        default="http://localhost:5000/api",
        description="Base URL of the missing-persons REST API"
    )
    api_timeout_seconds: float = Field(default=10.0, description="Timeout for remote API calls")

    # Admin dashboard
    admin_case_limit: int = Field(default=100, description="Cases loaded into the admin dashboard")

    # Sighting wizard rules
    sighting_description_min_length: int = Field(
        default=20,
        description="Minimum characters for a sighting description"
    )
    timezone: str = Field(
        default="Africa/Addis_Ababa",
        description="IANA zone sighting dates and times are entered in when the form carries no UTC offset"
    )
    # Off by default: an attempted contact may be submitted without a result
    require_contact_result: bool = Field(
        default=False,
        description="Block submission when a contact attempt has no result"
    )

    # CORS Configuration
    cors_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
