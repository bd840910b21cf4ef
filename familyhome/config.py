"""Family Home client configuration."""

import secrets
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    app_name: str = "Family Home"
    debug: bool = False

    # Paths
    data_dir: Path = Path.home() / "familyhome" / "data"

    # Local key-value store
    db_path: Path = Path.home() / "familyhome" / "data" / "familyhome.db"

    # Remote backend (unset = simulation mode)
    backend_url: Optional[str] = None
    backend_timeout: float = 15.0
    offline_fallback: bool = True  # substitute local results when remote calls fail

    # Simulation
    simulated_delay: float = 1.0
    message_delay: float = 0.5
    placeholder_avatar_url: str = "https://via.placeholder.com/150"

    # Session tokens
    session_secret: str = ""
    session_algorithm: str = "HS256"
    session_expire_days: int = 30

    # Avatar / pet timing
    animation_reset_seconds: float = 1.0
    pet_decay_interval: int = 3600  # seconds between decay ticks
    pet_tick_enabled: bool = False

    model_config = {"env_prefix": "FAMILYHOME_"}

    def ensure_dirs(self) -> None:
        """Create all required directories."""
        for d in [self.data_dir, self.db_path.parent]:
            d.mkdir(parents=True, exist_ok=True)

    def ensure_secrets(self) -> None:
        """Generate the session secret if not set, persist it so it survives restarts."""
        secrets_file = self.data_dir / ".secrets"
        saved = {}
        if secrets_file.exists():
            for line in secrets_file.read_text().strip().splitlines():
                if "=" in line:
                    k, v = line.split("=", 1)
                    saved[k.strip()] = v.strip()

        if not self.session_secret:
            self.session_secret = saved.get("session_secret", "") or secrets.token_urlsafe(32)

        secrets_file.write_text(f"session_secret={self.session_secret}\n")


settings = Settings()
