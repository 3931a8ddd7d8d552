from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    grade_scale: str = os.getenv("GRADE_SCALE", "standard").strip().lower()

    chart_center: float = _float_env("CHART_CENTER", 50.0)
    chart_radius: float = _float_env("CHART_RADIUS", 40.0)

    service_name: str = os.getenv("SERVICE_NAME", "gradetrack")
    environment: str = os.getenv("ENVIRONMENT", "development")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_format: str = os.getenv("LOG_FORMAT", "console").strip().lower()


settings = Settings()
