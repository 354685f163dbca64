from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    LOG_LEVEL: str = "INFO"
    # Static zone table for the simulated estimator (compiled-in defaults if missing)
    RISK_ZONES_CONFIG: str = "config/risk_zones.yaml"
    # Open-Meteo Marine — free, no API key needed
    OPEN_METEO_MARINE_URL: str = "https://marine-api.open-meteo.com/v1/marine"
    WEATHER_TIMEOUT: float = 10.0
    WEATHER_SAMPLE_TARGET: int = 5
    # aisstream.io — real-time AIS WebSocket (traffic falls back to simulated when unset)
    AISSTREAM_API_KEY: str | None = None
    AISSTREAM_WS_URL: str = "wss://stream.aisstream.io/v0/stream"
    AISSTREAM_OPEN_TIMEOUT: float = 10.0
    # Collection window per sampled waypoint (seconds)
    TRAFFIC_SESSION_SECONDS: float = 8.0
    TRAFFIC_SAMPLE_TARGET: int = 3
    # Half-width of the per-point bounding box (0.5° ≈ 55 km)
    TRAFFIC_BBOX_RADIUS_DEG: float = 0.5
    # API authentication (if unset, all requests pass — backward compatible for local dev)
    VOYAGERISK_API_KEY: str | None = None
    # CORS origins (comma-separated string for env var support)
    CORS_ORIGINS: str = "http://localhost:5173"


settings = Settings()
