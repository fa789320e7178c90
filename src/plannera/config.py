"""Plannera configuration: legislation fetching, logging and MLflow settings."""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Legislation fetching
    legislation_fetch_timeout_s: float = 15.0
    legislation_fetch_retries: int = 2
    legislation_fetch_retry_delay_s: float = 0.75
    legislation_user_agent: str = "PlanneraLegislationFetcher/1.0 (+https://plannera.ai)"
    legislation_use_fixtures: bool = False
    legislation_export_base_url: str = "https://legislation.nsw.gov.au/export/xml"

    @model_validator(mode="after")
    def _strip_strings(self) -> "Settings":
        """Strip whitespace/newlines from string settings, a common paste error."""
        for field in ("legislation_user_agent", "legislation_export_base_url",
                      "mlflow_tracking_uri", "mlflow_experiment_name"):
            val = getattr(self, field)
            if val and val != val.strip():
                setattr(self, field, val.strip())
        self.legislation_export_base_url = self.legislation_export_base_url.rstrip("/")
        return self

    # MLflow
    mlflow_tracking_uri: str = "sqlite:///mlruns/mlflow.db"
    mlflow_experiment_name: str = "plannera-ingest"

    # Logging
    log_json: bool = True
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
