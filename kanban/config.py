from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from kanban import __version__


class Settings(BaseSettings):
  model_config = SettingsConfigDict(env_file=".env", extra="ignore")

  database_url: str = "sqlite+aiosqlite:///./kanban.db"
  database_echo: bool = False
  app_version: str = __version__

  host: str = "127.0.0.1"
  port: int = 4567

  cors_origins: str = "http://localhost:4567,http://127.0.0.1:4567"
  cors_origin_regex: str | None = None
  trusted_hosts: str = "localhost,127.0.0.1,0.0.0.0,testserver"

  default_tag_color: str = "#f179af"

  log_level: str = "INFO"
  log_json: bool = False
  log_file: str | None = None

  def cors_origin_list(self) -> list[str]:
    return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

  def trusted_host_list(self) -> list[str]:
    return [h.strip() for h in self.trusted_hosts.split(",") if h.strip()]


settings = Settings()
