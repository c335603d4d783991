"""SMTP credential check for the transactional mail transport (OTP, bookings)."""

import logging
import os
import smtplib
import ssl
from dataclasses import dataclass
from typing import Optional

from propsync.config import load_env_file
from propsync.exceptions import ConfigError

__all__ = ["SmtpSettings", "SmtpCheckResult", "verify_smtp_connection"]

logger = logging.getLogger(__name__)

DEFAULT_SMTP_PORT = 587
DEFAULT_SMTP_TIMEOUT = 10.0


@dataclass
class SmtpSettings:
    host: Optional[str] = None
    port: int = DEFAULT_SMTP_PORT
    user: Optional[str] = None
    password: Optional[str] = None
    timeout: float = DEFAULT_SMTP_TIMEOUT

    @classmethod
    def from_env(cls) -> "SmtpSettings":
        """Load SMTP_* settings from the environment (and .env).

        Raises:
            ConfigError: If SMTP_PORT or SMTP_TIMEOUT is not a number
        """
        load_env_file()

        port_value = os.environ.get("SMTP_PORT", str(DEFAULT_SMTP_PORT))
        try:
            port = int(port_value)
        except ValueError as exc:
            raise ConfigError(f"Invalid SMTP_PORT: {port_value!r}") from exc

        timeout_value = os.environ.get("SMTP_TIMEOUT", str(DEFAULT_SMTP_TIMEOUT))
        try:
            timeout = float(timeout_value)
        except ValueError as exc:
            raise ConfigError(f"Invalid SMTP_TIMEOUT: {timeout_value!r}") from exc

        return cls(
            host=os.environ.get("SMTP_HOST"),
            port=port,
            user=os.environ.get("SMTP_USER"),
            password=os.environ.get("SMTP_PASS"),
            timeout=timeout,
        )

    def masked_password(self) -> str:
        if not self.password:
            return "NOT SET"
        return "***" + self.password[-4:]

    def validate(self) -> None:
        missing = []
        if not self.host:
            missing.append("SMTP_HOST")
        if self.user and not self.password:
            missing.append("SMTP_PASS")
        if missing:
            raise ConfigError(
                "Missing required SMTP configuration:\n  - " + "\n  - ".join(missing)
            )


@dataclass(frozen=True)
class SmtpCheckResult:
    ok: bool
    error: Optional[str] = None
    code: Optional[int] = None


def _unverified_context() -> ssl.SSLContext:
    # Relay certificates are not validated, matching the mail transport.
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def verify_smtp_connection(settings: SmtpSettings) -> SmtpCheckResult:
    """Connect, upgrade to TLS when offered, and authenticate.

    Never raises for connection or authentication problems; they are
    reported in the result instead.
    """
    logger.info(f"Verifying SMTP connection to {settings.host}:{settings.port}...")
    try:
        with smtplib.SMTP(
            settings.host, settings.port, timeout=settings.timeout
        ) as smtp:
            smtp.ehlo()
            if smtp.has_extn("starttls"):
                smtp.starttls(context=_unverified_context())
                smtp.ehlo()
            if settings.user:
                smtp.login(settings.user, settings.password or "")
            smtp.noop()
    except smtplib.SMTPResponseException as exc:
        message = exc.smtp_error
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")
        return SmtpCheckResult(ok=False, error=str(message), code=exc.smtp_code)
    except (smtplib.SMTPException, OSError) as exc:
        return SmtpCheckResult(ok=False, error=str(exc) or exc.__class__.__name__)

    return SmtpCheckResult(ok=True)
