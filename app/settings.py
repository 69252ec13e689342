"""Application settings using Pydantic BaseSettings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    port: int = 8080

    # Outbound HTTP
    http_timeout_seconds: float = 15.0

    # TextMagic (contact directory + SMS)
    textmagic_username: str = ""
    textmagic_api_key: str = ""
    textmagic_base_url: str = "https://rest.textmagic.com/api/v2"
    textmagic_contact_list_id: str = "4344890"  # Customers list

    # Airtable (record store)
    airtable_api_key: str = ""
    airtable_base_id: str = ""
    airtable_partial_table: str = "Partial"
    airtable_r2e_table: str = "R2E"
    airtable_base_url: str = "https://api.airtable.com/v0"

    # Short.io (link shortener)
    shortio_api_key: str = ""
    shortio_domain: str = ""
    shortio_base_url: str = "https://api.short.io"

    # Downstream forms
    registration_form_url: str = "https://forms.democracyos.com/t/bj1RaePxL2us"
    landing_redirect_url: str = "https://forms.democracyos.com/burlingtonvt-register"

    # Follow-up
    followup_delay_minutes: int = 15
    followup_brand_name: str = "DemocracyOS"
    followup_sent_marker_ttl_seconds: int = 7 * 24 * 3600

    # Redis (optional)
    redis_url: str = "redis://localhost:6379/0"
    redis_enabled: bool = False  # Disable Redis by default for dev

    # Cloud Tasks (optional; in-process scheduling when worker URL is unset)
    gcp_project_id: str = "local-development"
    cloud_tasks_location: str = "us-central1"
    cloud_tasks_queue_name: str = "lead-followups"
    cloud_tasks_worker_url: str | None = None  # Base URL of the /workers routes

    # Twilio Verify (OTP)
    twilio_account_sid: str | None = None
    twilio_auth_token: str | None = None
    twilio_verify_service_sid: str | None = None
    otp_resend_cooldown_seconds: int = 180
    otp_pending_ttl_seconds: int = 600

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
