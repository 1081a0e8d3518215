"""Settings for board-metrics.

All values come from ``BOARD_METRICS_*`` environment variables or a ``.env``
file. List-valued fields accept JSON (``'["a", "b"]'``).

Manifesto:
    Configuration should be explicit, validated, and environment-driven.
    The core never reads these settings directly: the pipeline turns them
    into a :class:`~board_metrics.core.config.BoardConfig` and passes that in.

Fields
──────
github_*        : Issue source (token, API URL, owner, repo, paging)
project_id      : Board whose column events are tracked
stages          : Five canonical stage names, in pipeline order
ignored_columns : Pre-board columns that reset the timeline
ticket_threshold: Lowest issue number to evaluate (iteration stops there)
field_delimiter : Delimiter of the written artifact
output_dir      : Where the artifact goes (``tmp`` when offline)
smtp_* / mail_* : Notifier
log_level/format: structlog configuration

Requires ``pydantic-settings``.
"""

from __future__ import annotations

from datetime import date
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from board_metrics.core.config import BoardConfig
from board_metrics.core.stages import (
    DEFAULT_IGNORED_COLUMNS,
    DEFAULT_STAGES,
    DEFAULT_TRACKED_LABELS,
    StageCatalog,
    column_rules_for,
)


class BoardMetricsSettings(BaseSettings):
    """board-metrics configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BOARD_METRICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Issue source ─────────────────────────────────────────────
    github_token: SecretStr | None = None
    github_api_url: str = "https://api.github.com"
    owner: str = "Gepardec"
    repo: str = "mega"
    page_size: int = Field(default=30, ge=1, le=100)
    fetch_concurrency: int = Field(default=4, ge=1)
    request_timeout: float = Field(default=30.0, gt=0)

    # ── Board ────────────────────────────────────────────────────
    project_id: int = 4946323
    stages: list[str] = Field(default_factory=lambda: list(DEFAULT_STAGES))
    ignored_columns: list[str] = Field(default_factory=lambda: sorted(DEFAULT_IGNORED_COLUMNS))
    tracked_labels: list[str] = Field(default_factory=lambda: list(DEFAULT_TRACKED_LABELS))
    ticket_threshold: int | None = Field(
        default=106,
        description="Lowest issue number evaluated; None reads every issue",
    )

    # ── Record sink ──────────────────────────────────────────────
    field_delimiter: str = ";"
    offline: bool = False
    output_dir: Path | None = None
    file_name_pattern: str = "metrics_{date}.csv"

    # ── Notifier ─────────────────────────────────────────────────
    notify: bool = True
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: SecretStr | None = None
    smtp_use_tls: bool = True
    mail_from: str | None = None
    mail_recipients: list[str] = Field(default_factory=list)
    mail_subject: str = "GitHub metrics"
    mail_body: str = "Hello,\n\nthe board metrics are attached as a CSV file.\n"

    # ── API ──────────────────────────────────────────────────────
    api_title: str = "board-metrics"
    api_prefix: str = "/api/v1"

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: str = "console"

    @field_validator("field_delimiter")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("field_delimiter must be a single character")
        return value

    @field_validator("stages")
    @classmethod
    def _valid_stages(cls, value: list[str]) -> list[str]:
        # one name per row date column
        column_rules_for(StageCatalog(tuple(value)))
        return value

    def board_config(self) -> BoardConfig:
        """The pure configuration value handed to the core."""
        stages = StageCatalog(tuple(self.stages))
        return BoardConfig(
            project_id=self.project_id,
            stages=stages,
            ignored_columns=frozenset(self.ignored_columns),
            column_rules=column_rules_for(stages),
            tracked_labels=tuple(self.tracked_labels),
        )

    def resolved_output_dir(self) -> Path:
        if self.output_dir is not None:
            return self.output_dir
        return Path("tmp") if self.offline else Path("/tmp")

    def artifact_path(self, today: date | None = None) -> Path:
        today = today or date.today()
        return self.resolved_output_dir() / self.file_name_pattern.format(date=today.isoformat())

    @property
    def mail_configured(self) -> bool:
        return bool(self.smtp_host and self.mail_from and self.mail_recipients)


@lru_cache(maxsize=1)
def get_settings() -> BoardMetricsSettings:
    """Cached settings — loaded once per process."""
    return BoardMetricsSettings()
