"""
Auth Settings

Signing secrets and token lifetimes, built once at startup and passed
explicitly to the token service.
"""

import logging
from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_ACCESS_SECRET = "dev-secret-change-in-production"
DEFAULT_REFRESH_SECRET = "dev-refresh-secret-change-in-production"


class InsecureConfigurationError(RuntimeError):
    """Raised when production starts with development signing secrets"""


class AuthSettings(BaseModel):
    """Immutable auth configuration"""

    model_config = ConfigDict(frozen=True)

    access_secret: str = Field(min_length=1)
    refresh_secret: str = Field(min_length=1)
    issuer: str = "legalsaas"
    audience: str = "legalsaas-users"
    access_expires: timedelta = timedelta(hours=24)
    refresh_expires: timedelta = timedelta(days=7)
    algorithm: str = "HS256"
    environment: str = "development"

    @classmethod
    def from_config(cls, config) -> "AuthSettings":
        return cls(
            access_secret=config.JWT_ACCESS_SECRET,
            refresh_secret=config.JWT_REFRESH_SECRET,
            issuer=config.JWT_ISSUER,
            audience=config.JWT_AUDIENCE,
            access_expires=timedelta(minutes=int(config.JWT_ACCESS_EXPIRES_MINUTES)),
            refresh_expires=timedelta(days=int(config.JWT_REFRESH_EXPIRES_DAYS)),
            environment=config.ENVIRONMENT,
        )

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    def uses_default_secrets(self) -> bool:
        return (
            self.access_secret == DEFAULT_ACCESS_SECRET
            or self.refresh_secret == DEFAULT_REFRESH_SECRET
        )

    def ensure_production_safe(self) -> None:
        """
        Refuse to run production on development secrets.

        Outside production the defaults are allowed but logged.

        Raises:
            InsecureConfigurationError: production with a default or shared secret
        """
        if self.is_production:
            if self.uses_default_secrets():
                raise InsecureConfigurationError(
                    "Default JWT secrets in production: set JWT_ACCESS_SECRET "
                    "and JWT_REFRESH_SECRET"
                )
            if self.access_secret == self.refresh_secret:
                raise InsecureConfigurationError(
                    "JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ"
                )
        elif self.uses_default_secrets():
            logger.warning(
                "Using default JWT secrets (environment=%s); never deploy this to production",
                self.environment,
            )
