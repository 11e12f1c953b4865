from typing import Dict, List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database / auth configuration
    DATABASE_URL: str | None = None
    JWT_SECRET: str | None = None
    JWT_ALGORITHM: str = "HS256"
    JWT_ORG_CLAIM: str = "org_id"  # Claim carrying the active organization id

    LOG_LEVEL: str = "INFO"

    # Role templates as "resource:action" grants. System roles with a matching
    # name take their grants from here instead of stored permission rows.
    ROLE_TEMPLATES: Dict[str, List[str]] = {
        "admin": [
            "analytics:read",
            "analytics:write",
            "analytics:delete",
            "analytics:manage",
            "contacts:read",
            "contacts:write",
            "contacts:delete",
            "messages:read",
            "messages:write",
            "templates:read",
            "templates:write",
            "templates:delete",
            "users:read",
            "users:write",
            "users:delete",
            "roles:read",
            "roles:write",
            "roles:delete",
            "settings:read",
            "settings:write",
        ],
        "manager": [
            "analytics:read",
            "analytics:write",
            "analytics:delete",
            "contacts:read",
            "contacts:write",
            "messages:read",
            "messages:write",
            "templates:read",
        ],
        "agent": [
            "analytics:read",
            "contacts:read",
            "messages:read",
        ],
    }

    # Dashboard widget allow-lists
    WIDGET_DATA_SOURCES: List[str] = [
        "messages",
        "contacts",
        "campaigns",
        "transfers",
        "sessions",
    ]
    WIDGET_METRICS: List[str] = ["count", "sum", "avg", "percentage"]
    WIDGET_DISPLAY_TYPES: List[str] = ["number", "percentage", "chart"]
    WIDGET_SIZES: List[str] = ["small", "medium", "large"]
    WIDGET_FILTER_OPERATORS: List[str] = [
        "equals",
        "not_equals",
        "contains",
        "gt",
        "lt",
        "gte",
        "lte",
    ]

    # When true, reorder must list every visible widget of the organization
    REORDER_REQUIRE_FULL_PERMUTATION: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


settings = Settings()
