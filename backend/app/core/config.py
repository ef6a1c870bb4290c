from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional
from pathlib import Path

class Settings(BaseSettings):
    app_name: str = Field(default="Ticket QR API", alias="APP_NAME")
    env: str = Field(default="dev", alias="ENV")
    database_url: str = Field(default="sqlite:///./tickets.db", alias="DATABASE_URL")
    # Seconds a SQLite writer waits on a locked database before failing
    sqlite_busy_timeout: float = Field(default=30.0, alias="SQLITE_BUSY_TIMEOUT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    create_tables_on_startup: bool = Field(default=True, alias="CREATE_TABLES_ON_STARTUP")
    cors_origins_raw: Optional[str] = Field(default=None, alias="CORS_ORIGINS", description="Comma or space separated list of allowed CORS origins")
    qr_box_size: int = Field(default=10, alias="QR_BOX_SIZE")
    qr_border: int = Field(default=4, alias="QR_BORDER")

    class Config:
        # Load env from backend/.env regardless of CWD
        env_file = str(Path(__file__).resolve().parents[2] / ".env")
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"

    def _parse_list(self, v: Optional[str]) -> List[str]:
        if v is None:
            return []
        s = v.strip()
        if not s:
            return []
        if s.startswith("[") and s.endswith("]"):
            try:
                import json
                loaded = json.loads(s)
                if isinstance(loaded, list):
                    return [str(e).strip() for e in loaded if str(e).strip()]
            except ValueError:
                pass
        return [e.strip() for e in s.replace(" ", ",").split(",") if e.strip()]

    @property
    def cors_origins(self) -> List[str]:
        items = self._parse_list(self.cors_origins_raw)
        # Fallback dev defaults if none provided
        if not items:
            return ["http://localhost:5173", "http://127.0.0.1:5173"]
        # Dev convenience: ensure both localhost and 127.0.0.1 variants for same ports
        augmented = set(items)
        for origin in list(items):
            if origin.startswith("http://localhost:"):
                port = origin.rsplit(":", 1)[1]
                augmented.add(f"http://127.0.0.1:{port}")
            if origin.startswith("http://127.0.0.1:"):
                port = origin.rsplit(":", 1)[1]
                augmented.add(f"http://localhost:{port}")
        return sorted(augmented)

settings = Settings()  # type: ignore
