"""
Board metrics pipeline.

One run reads every issue down to the threshold, reconstructs each issue's
stage timeline, writes the rows as a delimited file and mails it.

Failure policy:
    issue source fails        -> run FAILED, nothing written, nothing sent
    record sink fails         -> logged, notification skipped, run COMPLETED
    notification fails        -> logged, run COMPLETED

Params:
    notify: Send the artifact (default: settings.notify)
    output: Artifact path (default: settings.artifact_path())
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from board_metrics.core.errors import MetricsError, SinkError, is_fatal
from board_metrics.core.models import Row
from board_metrics.core.rows import build_row
from board_metrics.core.settings import BoardMetricsSettings, get_settings
from board_metrics.framework.alerts import (
    ConsoleChannel,
    DeliveryResult,
    EmailChannel,
    Notification,
    NotifierRegistry,
)
from board_metrics.framework.logging import get_logger, log_step, push_context
from board_metrics.framework.sinks import DelimitedRecordSink, build_headers
from board_metrics.framework.sources import GitHubIssueSource, IssueSource

log = get_logger(__name__)


class PipelineStatus(str, Enum):
    """How a run ended. Only a failed issue source yields FAILED."""

    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class BoardMetricsResult:
    """Outcome of one run: status, counters, rows, artifact and deliveries."""

    status: PipelineStatus
    started_at: datetime
    completed_at: datetime | None = None
    error: str | None = None
    metrics: dict[str, Any] = field(default_factory=dict)
    rows: list[Row] = field(default_factory=list)
    artifact: Path | None = None
    deliveries: list[DeliveryResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "error": self.error,
            "metrics": self.metrics,
            "artifact": str(self.artifact) if self.artifact else None,
            "deliveries": [d.to_dict() for d in self.deliveries],
        }

    @property
    def succeeded(self) -> bool:
        return self.status is PipelineStatus.COMPLETED

    @property
    def duration_seconds(self) -> float | None:
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()


# ------------------------------------------------------------------ #
# Collaborator factories
# ------------------------------------------------------------------ #


def build_source(settings: BoardMetricsSettings) -> GitHubIssueSource:
    token = settings.github_token.get_secret_value() if settings.github_token else None
    if token is None:
        log.warning("source.no_token", detail="GitHub requests are unauthenticated and heavily rate limited")
    return GitHubIssueSource(
        settings.owner,
        settings.repo,
        token=token,
        api_url=settings.github_api_url,
        page_size=settings.page_size,
        threshold=settings.ticket_threshold,
        fetch_concurrency=settings.fetch_concurrency,
        timeout=settings.request_timeout,
        tracked_labels=settings.tracked_labels,
    )


def build_notifier(settings: BoardMetricsSettings) -> NotifierRegistry:
    if settings.mail_configured:
        channel = EmailChannel(
            "email",
            smtp_host=settings.smtp_host,
            from_address=settings.mail_from,
            recipients=list(settings.mail_recipients),
            smtp_port=settings.smtp_port,
            smtp_user=settings.smtp_user,
            smtp_password=settings.smtp_password.get_secret_value() if settings.smtp_password else None,
            use_tls=settings.smtp_use_tls,
        )
    else:
        channel = ConsoleChannel()
    return NotifierRegistry([channel])


def build_sink(settings: BoardMetricsSettings, path: Path) -> DelimitedRecordSink:
    return DelimitedRecordSink(
        path,
        delimiter=settings.field_delimiter,
        headers=build_headers(settings.stages),
    )


# ------------------------------------------------------------------ #
# Pipeline
# ------------------------------------------------------------------ #


class BoardMetricsPipeline:
    """Issue source -> core -> record sink -> notifier."""

    name = "board_metrics"

    def __init__(
        self,
        settings: BoardMetricsSettings | None = None,
        *,
        source: IssueSource | None = None,
        sink: DelimitedRecordSink | None = None,
        notifier: NotifierRegistry | None = None,
        params: dict[str, Any] | None = None,
        today: date | None = None,
    ) -> None:
        self.params = params or {}
        self.settings = settings or get_settings()
        self.config = self.settings.board_config()
        self._source = source
        self._sink = sink
        self._notifier = notifier
        self._today = today

    @property
    def notify_enabled(self) -> bool:
        return bool(self.params.get("notify", self.settings.notify))

    def artifact_path(self) -> Path:
        output = self.params.get("output")
        return Path(output) if output else self.settings.artifact_path(self._today)

    def run(self) -> BoardMetricsResult:
        run_id = uuid.uuid4().hex[:12]
        started_at = datetime.now(UTC)
        context = push_context(
            run_id=run_id,
            pipeline=self.name,
            repo=f"{self.settings.owner}/{self.settings.repo}",
        )
        owns_source = self._source is None
        source = self._source or build_source(self.settings)

        try:
            log.info("pipeline.start", threshold=self.settings.ticket_threshold)
            try:
                rows, issues_seen = self._collect(source)
            except MetricsError as e:
                if not is_fatal(e):
                    raise
                log.error("pipeline.source_failed", **e.to_dict())
                return BoardMetricsResult(
                    status=PipelineStatus.FAILED,
                    started_at=started_at,
                    completed_at=datetime.now(UTC),
                    error=str(e),
                    metrics={"run_id": run_id},
                )

            log.info("pipeline.issues", issues_seen=issues_seen, rows=len(rows))

            artifact = self._write(rows)
            deliveries: list[DeliveryResult] = []
            if artifact is not None and self.notify_enabled:
                deliveries = self._deliver(artifact, run_id, len(rows))

            result = BoardMetricsResult(
                status=PipelineStatus.COMPLETED,
                started_at=started_at,
                completed_at=datetime.now(UTC),
                metrics={
                    "run_id": run_id,
                    "issues_seen": issues_seen,
                    "rows": len(rows),
                    "artifact_written": artifact is not None,
                    "notifications_sent": sum(1 for d in deliveries if d.success),
                    "notifications_failed": sum(1 for d in deliveries if not d.success),
                },
                rows=rows,
                artifact=artifact,
                deliveries=deliveries,
            )
            log.info("pipeline.end", duration_s=result.duration_seconds, **result.metrics)
            return result
        finally:
            if owns_source and hasattr(source, "close"):
                source.close()
            context.restore()

    def _collect(self, source: IssueSource) -> tuple[list[Row], int]:
        rows: list[Row] = []
        issues_seen = 0
        with log_step("pipeline.collect", log_start=False) as timer:
            for record in source.iter_issues():
                issues_seen += 1
                row = build_row(record, self.config)
                if row is None:
                    log.debug("issue.dropped", issue=record.number, pull_request=record.issue.is_pull_request)
                    continue
                rows.append(row)
            timer.add_metric("issues_seen", issues_seen)
            timer.add_metric("rows", len(rows))
        return rows, issues_seen

    def _write(self, rows: list[Row]) -> Path | None:
        try:
            sink = self._sink or build_sink(self.settings, self.artifact_path())
            result = sink.write(rows)
        except SinkError as e:
            log.error("sink.failed", **e.to_dict())
            return None
        log.info("sink.written", path=str(result.path), rows=result.rows_written)
        return result.path

    def _deliver(self, artifact: Path, run_id: str, row_count: int) -> list[DeliveryResult]:
        notifier = self._notifier or build_notifier(self.settings)
        notification = Notification(
            subject=self.settings.mail_subject,
            body=self.settings.mail_body,
            source=self.name,
            attachment=artifact,
            run_id=run_id,
            metadata={"rows": row_count},
        )
        log.info("notification.start", channels=[channel.name for channel in notifier.channels])
        return notifier.send_to_all(notification)
