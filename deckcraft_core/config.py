"""Runtime configuration loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from deckcraft_core.schemas.deck import ChartSeriesPolicy


class Settings(BaseSettings):
    """Editor settings, overridable via ``DECKCRAFT_*`` environment variables."""

    # History
    history_limit: int = 50

    # Autosave interval in seconds
    autosave_interval: float = 10.0

    # Validation strictness for chart series vs. xLabels lengths
    chart_series_policy: ChartSeriesPolicy = ChartSeriesPolicy.IGNORE

    # Rendering
    default_theme: str = "Nebula"
    canvas_width: int = 1600
    canvas_height: int = 900

    # Host bridge
    ai_tool_id: str = "create_or_edit_deck"
    delivery_max_attempts: int = 3

    model_config = SettingsConfigDict(
        env_prefix="DECKCRAFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
