import os


class Settings:
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./daily_payroll.db")

    # Application
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    TIMEZONE: str = os.getenv("TIMEZONE", "Africa/Casablanca")
    CURRENCY: str = os.getenv("CURRENCY", "DH")
    STANDARD_WORK_HOURS: int = int(os.getenv("STANDARD_WORK_HOURS", "8"))

    # Nightly absence sweep
    ENABLE_ABSENCE_SWEEP: bool = os.getenv("ENABLE_ABSENCE_SWEEP", "True").lower() == "true"
    ABSENCE_SWEEP_HOUR: int = int(os.getenv("ABSENCE_SWEEP_HOUR", "18"))
    ABSENCE_SWEEP_MINUTE: int = int(os.getenv("ABSENCE_SWEEP_MINUTE", "0"))

    # Deployment
    PORT: int = int(os.getenv("PORT", "8000"))
    HOST: str = os.getenv("HOST", "0.0.0.0")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # Salary periods
    MIN_SALARY_YEAR: int = 2020
    MAX_SALARY_YEAR: int = 2100

    # API
    API_VERSION: str = os.getenv("API_VERSION", "v1")
    API_PREFIX: str = f"/api/{API_VERSION}"

    @property
    def database_url(self) -> str:
        """Database URL, normalising the legacy postgres:// scheme"""
        url = self.DATABASE_URL
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        return url

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def validate_required_settings(self) -> list:
        """Return the names of required settings that are missing or invalid"""
        missing = []

        if not self.DATABASE_URL:
            missing.append("DATABASE_URL")

        if not self.CURRENCY:
            missing.append("CURRENCY")

        if not 0 <= self.ABSENCE_SWEEP_HOUR <= 23:
            missing.append("ABSENCE_SWEEP_HOUR")

        if not 0 <= self.ABSENCE_SWEEP_MINUTE <= 59:
            missing.append("ABSENCE_SWEEP_MINUTE")

        return missing

    def get_scheduler_config(self) -> dict:
        """Scheduler job configuration"""
        return {
            "absence_sweep": {
                "enabled": self.ENABLE_ABSENCE_SWEEP,
                "hour": self.ABSENCE_SWEEP_HOUR,
                "minute": self.ABSENCE_SWEEP_MINUTE,
                "timezone": self.TIMEZONE,
            }
        }

    def get_logging_config(self) -> dict:
        """dictConfig-compatible logging configuration"""
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": self.LOG_FORMAT,
                },
            },
            "handlers": {
                "default": {
                    "formatter": "default",
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": self.LOG_LEVEL,
                "handlers": ["default"],
            },
        }


# Global settings instance
settings = Settings()


def validate_settings():
    """Raise if any required setting is missing"""
    missing = settings.validate_required_settings()

    if missing:
        raise ValueError(f"Missing or invalid settings: {', '.join(missing)}")

