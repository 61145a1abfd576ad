"""
Configuration loader utility for environment-specific settings.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from sqlalchemy.engine import make_url

from .settings import DEFAULT_JWT_SECRET, Environment, Settings

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Utility class for loading environment-specific configurations"""

    @staticmethod
    def load_environment_config(environment: Optional[str] = None) -> Settings:
        """
        Load configuration for the specified environment.

        Args:
            environment: Target environment (development, staging, production, testing)
                        If None, uses ENVIRONMENT env var or defaults to development

        Returns:
            Settings instance with environment-specific configuration
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")

        env = Environment(environment.lower())
        env_file_path = Path(f".env.{env.value}")

        if env_file_path.exists():
            return Settings(_env_file=str(env_file_path), environment=env)

        logger.warning(
            f"Environment file {env_file_path} not found, using default settings"
        )
        return Settings(environment=env)

    @staticmethod
    def validate_environment_config(environment: str) -> bool:
        """
        Validate that an environment configuration exists and is valid.

        Args:
            environment: Environment name to validate

        Returns:
            True if configuration is valid, False otherwise
        """
        try:
            env = Environment(environment.lower())
        except ValueError:
            return False

        if not Path(f".env.{env.value}").exists():
            return False

        try:
            settings = ConfigLoader.load_environment_config(env.value)
        except Exception as e:
            logger.error(f"Invalid configuration for {env.value}: {e}")
            return False

        required_settings = [
            settings.app_name,
            settings.environment,
            settings.host,
            settings.port,
            settings.database.url,
        ]
        return all(setting is not None for setting in required_settings)

    @staticmethod
    def create_sample_env_file(environment: str, output_path: Optional[str] = None) -> str:
        """
        Create a sample .env file for the specified environment.

        Args:
            environment: Target environment
            output_path: Optional custom output path

        Returns:
            Path to the created sample file
        """
        env = Environment(environment.lower())

        if output_path is None:
            output_path = f".env.{env.value}.sample"

        defaults = Settings()
        is_dev = env == Environment.DEVELOPMENT

        sample_content = f"""# Sample configuration for {env.value} environment
# Copy this file to .env.{env.value} and modify as needed

# Application Configuration
APP_NAME={defaults.app_name}
APP_VERSION={defaults.app_version}
ENVIRONMENT={env.value}
DEBUG={'true' if is_dev else 'false'}

# Server Configuration
HOST={defaults.host}
PORT={defaults.port}
RELOAD={'true' if is_dev else 'false'}
WORKERS={1 if is_dev else 4}

# Logging Configuration
LOG_LEVEL={defaults.log_level.value}
LOG_JSON={'false' if is_dev else 'true'}

# Database Configuration
DATABASE_URL={defaults.database.url}
DATABASE_AUTO_CREATE={'true' if is_dev else 'false'}

# Security Configuration
SECURITY_JWT_SECRET=change-me
SECURITY_JWT_REFRESH_SECRET=change-me-too
SECURITY_ACCESS_TOKEN_EXPIRE_MINUTES={defaults.security.access_token_expire_minutes}
SECURITY_CORS_ORIGINS=["*"]

# Geocoding Provider
GEOCODING_BASE_URL={defaults.geocoding.base_url}
GEOCODING_USER_AGENT={defaults.geocoding.user_agent}
GEOCODING_TIMEOUT_SECONDS={defaults.geocoding.timeout_seconds}

# Nearby Queries
NEARBY_DEFAULT_RADIUS_KM={defaults.nearby.default_radius_km}
NEARBY_MAX_RESULTS={defaults.nearby.max_results}
"""

        with open(output_path, "w") as f:
            f.write(sample_content)

        return output_path


def describe_settings(settings: Settings) -> List[str]:
    """Startup summary lines. The database password is masked."""
    db_url = make_url(settings.database.url).render_as_string(hide_password=True)
    nearby = settings.nearby
    return [
        f"{settings.app_name} v{settings.app_version} ({settings.environment.value})",
        f"  listen    {settings.host}:{settings.port} workers={settings.workers} reload={settings.reload}",
        f"  database  {db_url} auto_create={settings.database.auto_create}",
        f"  geocoder  {settings.geocoding.base_url} timeout={settings.geocoding.timeout_seconds}s",
        f"  nearby    radius={nearby.default_radius_km}km limit={nearby.default_limit}/{nearby.max_results}",
        f"  search    debounce={settings.search.debounce_ms}ms min_query={settings.search.min_query_length}",
    ]


def startup_problems(settings: Settings) -> List[str]:
    """Settings that must not reach a production server."""
    problems = []
    if settings.is_production():
        if settings.security.jwt_secret == DEFAULT_JWT_SECRET:
            problems.append("SECURITY_JWT_SECRET is still the default")
        if settings.database.auto_create:
            problems.append("DATABASE_AUTO_CREATE must be false; run migrations instead")
        if settings.debug:
            problems.append("DEBUG must be false")
    return problems


def load_config_for_environment(environment: Optional[str] = None) -> Settings:
    """Convenience function to load configuration for an environment"""
    return ConfigLoader.load_environment_config(environment)
