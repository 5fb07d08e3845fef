from typing import Optional

from pydantic import PrivateAttr
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Zteller Investor Portal API"
    debug: bool = False
    environment: str = "development"

    database_url: str = "sqlite+aiosqlite:///./investor_portal.db"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Mail relay; leaving host/user/password empty selects the mock transport outside development
    smtp_host: Optional[str] = None
    smtp_port: int = 587
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_from_email: Optional[str] = None
    smtp_timeout: float = 10.0
    smtp_retry_interval: float = 60.0

    admin_email: str = "admin@zteller.ng"
    app_url: str = "http://localhost:3000"
    notification_url: str = "http://127.0.0.1:3005/api/send-admin-notification"

    monthly_rate: float = 0.05
    request_timeout: float = 30.0
    file_read_timeout: float = 30.0

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    _is_sqlite: bool = PrivateAttr(default=False)
    _is_postgresql: bool = PrivateAttr(default=False)

    def model_post_init(self, __context: object) -> None:
        _scheme = self.database_url.split(":")[0].lower()
        object.__setattr__(self, "_is_sqlite", "sqlite" in _scheme)
        object.__setattr__(self, "_is_postgresql", "postgresql" in _scheme)

    @property
    def is_sqlite(self) -> bool:
        return self._is_sqlite

    @property
    def is_postgresql(self) -> bool:
        return self._is_postgresql

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user and self.smtp_password)

    @property
    def mail_sender(self) -> Optional[str]:
        return self.smtp_from_email or self.smtp_user


settings = Settings()
