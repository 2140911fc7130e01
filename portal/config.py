"""Application configuration."""
from pydantic_settings import BaseSettings
from typing import Dict, List


def _parse_directory(raw: str) -> Dict[str, str]:
    """Parse a ``key:secret,key:secret`` string into a mapping."""
    directory = {}
    for entry in raw.split(","):
        if ":" not in entry:
            continue
        key, secret = entry.split(":", 1)
        key = key.strip()
        if key:
            directory[key] = secret.strip()
    return directory


class Settings(BaseSettings):
    """Application settings."""
    
    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "proctor_portal"
    storage_backend: str = "mongodb"  # "mongodb", "memory"
    
    # JWT
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 240
    
    # Application
    app_name: str = "Proctored Assessment Portal"
    app_version: str = "1.0.0"
    debug: bool = True
    log_level: str = "INFO"
    
    # CORS
    allowed_origins: str = "http://localhost:5173,http://localhost:3000"
    
    # Content provider
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    provider_timeout_seconds: float = 30.0
    
    # Directories
    admin_users: str = "admin:admin,hr_lead:secure_hiring"
    seed_candidates: str = "test@user.com:TEST1234,candidate@evalueate.com:EVAL2025"
    
    # Proctoring
    violation_termination_threshold: int = 2
    
    @property
    def allowed_origins_list(self) -> List[str]:
        """Get allowed origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]
    
    @property
    def admin_directory(self) -> Dict[str, str]:
        """Static admin directory (username -> password)."""
        return _parse_directory(self.admin_users)
    
    @property
    def candidate_seed_directory(self) -> Dict[str, str]:
        """Candidates provisioned at startup (email -> access code)."""
        return _parse_directory(self.seed_candidates)
    
    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
