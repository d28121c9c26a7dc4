"""
Main settings object.
"""

from datetime import timedelta
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Directory holding pbsmon_users.json and etc_groups/
    perun_data_path: Path = Path("data/perun")
    perun_refresh_interval: timedelta = timedelta(minutes=1)

    # Development only: every request is made by an administrator called 'admin'
    mock_admin: bool = False
    production: bool = False

    # Identity is established by the authenticating reverse proxy in front
    # of the service, which passes the user name in this header.
    remote_user_header: str = "X-Remote-User"
    admin_users: list[str] = []

    host: str = "0.0.0.0"
    port: int = 3000

    model_config = SettingsConfigDict(env_prefix="GRIDMON_", env_file=".env")
