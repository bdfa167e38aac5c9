import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .exceptions import ConfigError

ACCESS_KEY_ENV = 'AWS_ACCESS_KEY_ID'
SECRET_KEY_ENV = 'AWS_SECRET_ACCESS_KEY'
SESSION_TOKEN_ENV = 'AWS_SESSION_TOKEN'
REGION_ENVS = ('AWS_REGION', 'AWS_DEFAULT_REGION')
TIMEOUT_ENV = 'AWSIG_TIMEOUT'


@dataclass(frozen=True)
class Config:
    """Static credentials and region used to sign a request.

    The secret key and session token are excluded from ``repr`` so a config
    can be logged or shown in a traceback without leaking them.
    """

    secret_key: str = field(repr=False)
    region: Optional[str]
    access_key: str
    timeout: Optional[float] = None
    session_token: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> 'Config':
        """Build a config from the standard AWS environment variables."""
        env = os.environ if environ is None else environ

        missing = [name for name in (ACCESS_KEY_ENV, SECRET_KEY_ENV) if not env.get(name)]
        if missing:
            raise ConfigError(f"Missing environment variable(s): {', '.join(missing)}")

        region = next((env[name] for name in REGION_ENVS if env.get(name)), None)

        timeout = None
        raw_timeout = env.get(TIMEOUT_ENV)
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigError(f"{TIMEOUT_ENV} must be a number of seconds, got {raw_timeout!r}") from None

        return cls(
            secret_key=env[SECRET_KEY_ENV],
            region=region,
            access_key=env[ACCESS_KEY_ENV],
            timeout=timeout,
            session_token=env.get(SESSION_TOKEN_ENV) or None,
        )
