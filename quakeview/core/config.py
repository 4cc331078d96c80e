"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field

from quakeview.core.event import TimeRange


FEED_BASE_URL = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary"

DEFAULT_FEED_URLS: dict[TimeRange, str] = {
    TimeRange.DAY: f"{FEED_BASE_URL}/all_day.geojson",
    TimeRange.WEEK: f"{FEED_BASE_URL}/all_week.geojson",
    TimeRange.MONTH: f"{FEED_BASE_URL}/all_month.geojson",
}

DEFAULT_TILE_URL = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"

# Refresh every 5 minutes
DEFAULT_POLL_INTERVAL_SECONDS = 300


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        feed_urls: Feed endpoint per time range
        poll_interval_seconds: Period of the refresh timer
        request_timeout_seconds: Timeout for one feed request
        initial_time_range: Time range fetched at startup
        fit_padding_px: Margin kept around fitted bounds
        discard_stale_responses: Apply only the newest request's response
        map_width: Rendered map width in pixels
        map_height: Rendered map height in pixels
        tile_url: Tile URL template for the rendered map
    """
    feed_urls: dict[TimeRange, str] = field(default_factory=lambda: dict(DEFAULT_FEED_URLS))
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    request_timeout_seconds: float = 30
    initial_time_range: TimeRange = TimeRange.DAY
    fit_padding_px: int = 50
    discard_stale_responses: bool = True
    map_width: int = 800
    map_height: int = 400
    tile_url: str = DEFAULT_TILE_URL

    @property
    def fit_padding(self) -> tuple[int, int]:
        return (self.fit_padding_px, self.fit_padding_px)


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_feed_urls(feed_urls: dict[TimeRange, str]) -> list[ValidationError]:
    """Validate that every time range has a distinct http(s) feed URL.

    Pure function.
    """
    errors = []

    for time_range in TimeRange:
        url = feed_urls.get(time_range)
        if not url:
            errors.append(ValidationError(
                field=f"feed_urls.{time_range.value}",
                message=f"No feed URL for time range '{time_range.value}'",
            ))
        elif not url.startswith(("http://", "https://")):
            errors.append(ValidationError(
                field=f"feed_urls.{time_range.value}",
                message=f"Feed URL must be http(s), got {url}",
            ))

    urls = [u for u in feed_urls.values() if u]
    if len(set(urls)) != len(urls):
        errors.append(ValidationError(
            field="feed_urls",
            message="Time ranges share a feed URL",
            severity="warning",
        ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors = validate_feed_urls(config.feed_urls)

    if config.poll_interval_seconds <= 0:
        errors.append(ValidationError(
            field="poll_interval_seconds",
            message=f"Poll interval must be positive, got {config.poll_interval_seconds}",
        ))
    elif config.poll_interval_seconds < config.request_timeout_seconds:
        errors.append(ValidationError(
            field="poll_interval_seconds",
            message="Poll interval is shorter than the request timeout; ticks may overlap",
            severity="warning",
        ))

    if config.request_timeout_seconds <= 0:
        errors.append(ValidationError(
            field="request_timeout_seconds",
            message=f"Request timeout must be positive, got {config.request_timeout_seconds}",
        ))

    if config.fit_padding_px < 0:
        errors.append(ValidationError(
            field="fit_padding_px",
            message=f"Padding must not be negative, got {config.fit_padding_px}",
        ))

    if config.map_width <= 0 or config.map_height <= 0:
        errors.append(ValidationError(
            field="map_size",
            message=f"Map size must be positive, got {config.map_width}x{config.map_height}",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
