"""Pydantic models for configuration validation."""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

DEFAULT_CALENDAR_ID = "primary"
DEFAULT_REDIRECT_URI = "https://google-oauth2.herokuapp.com/oauth2fn"
DEFAULT_DURATION_MS = 1000 * 60 * 60 * 3


class TelegramConfig(BaseModel):
    """Telegram bot configuration."""

    bot_token: str = Field(..., description="Telegram bot token")
    mode: str = Field(default="poll", description="Mode: 'poll' or 'webhook'")
    webhook_url: Optional[str] = Field(default=None, description="Webhook URL (required if mode is webhook)")
    webhook_port: int = Field(default=8000, gt=0, description="Local port for the webhook server")
    poll_interval: float = Field(default=1.0, gt=0, description="Polling interval in seconds")
    require_mention: bool = Field(default=True, description="Only respond when bot is @mentioned")
    bot_username: Optional[str] = Field(default=None, description="Bot username (auto-detected if not provided)")


class AllowedConversation(BaseModel):
    """Allowed conversation configuration."""

    chat_id: int = Field(..., description="Telegram chat ID")


class AllowedUser(BaseModel):
    """Allowed user configuration."""

    user_id: int = Field(..., description="Telegram user ID")


class HangoutsConfig(BaseModel):
    """Google Calendar hangout plugin configuration."""

    key: str = Field(..., description="OAuth2 client id")
    secret: str = Field(..., description="OAuth2 client secret")
    refresh: str = Field(..., description="OAuth2 refresh token")
    id: str = Field(default=DEFAULT_CALENDAR_ID, description="Target calendar id")
    redirect: str = Field(default=DEFAULT_REDIRECT_URI, description="OAuth2 redirect URI")
    duration: int = Field(default=DEFAULT_DURATION_MS, gt=0, description="Event duration in milliseconds")
    create_conference: bool = Field(
        default=True,
        description="Ask Calendar to attach a Meet conference so the event has a hangout link",
    )

    @field_validator("key", "secret", "refresh")
    @classmethod
    def validate_credential(cls, v: str, info) -> str:
        """Reject empty credentials."""
        if not v or not v.strip():
            raise ValueError(f"Calendar credential `{info.field_name}` is missing")
        return v

    @field_validator("id", "redirect", mode="before")
    @classmethod
    def default_when_empty(cls, v, info):
        """Treat empty strings like omitted options."""
        if v is None or v == "":
            return DEFAULT_CALENDAR_ID if info.field_name == "id" else DEFAULT_REDIRECT_URI
        return v

    @field_validator("duration", mode="before")
    @classmethod
    def default_duration_when_empty(cls, v):
        """Treat a null or zero duration like an omitted one."""
        if v is None or v == 0:
            return DEFAULT_DURATION_MS
        return v


class AppConfig(BaseModel):
    """Main application configuration."""

    telegram: TelegramConfig = Field(..., description="Telegram configuration")
    allowed_conversations: List[AllowedConversation] = Field(
        default_factory=list, description="Allowed conversation IDs"
    )
    allowed_users: List[AllowedUser] = Field(default_factory=list, description="Allowed user IDs")
    hangouts: HangoutsConfig = Field(..., description="Hangout plugin configuration")

    def validate(self) -> None:
        """Validate configuration consistency."""
        if self.telegram.mode not in ("poll", "webhook"):
            raise ValueError(f"Unknown Telegram mode: {self.telegram.mode}")

        if self.telegram.mode == "webhook" and not self.telegram.webhook_url:
            raise ValueError("webhook_url is required when mode is 'webhook'")
