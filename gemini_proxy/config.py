import os
import logging
from dataclasses import dataclass, field

logger = logging.getLogger()

DEFAULT_MODEL = 'gemini-2.5-flash'
DEFAULT_API_BASE = 'https://generativelanguage.googleapis.com/v1beta'
DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class ProxyConfig:
    api_key: str = field(default='', repr=False)
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT
    allowed_origin: str = '*'

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        return cls(
            api_key=(env.get('GEMINI_API_KEY') or '').strip(),
            model=(env.get('GEMINI_MODEL') or '').strip() or DEFAULT_MODEL,
            api_base=((env.get('GEMINI_API_BASE') or '').strip() or DEFAULT_API_BASE).rstrip('/'),
            timeout=parse_timeout(env.get('GEMINI_TIMEOUT')),
            allowed_origin=(env.get('ALLOWED_ORIGIN') or '').strip() or '*',
        )


def parse_timeout(raw):
    if raw is None or not str(raw).strip():
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning(f"Invalid GEMINI_TIMEOUT {raw!r}, using {DEFAULT_TIMEOUT}s")
        return DEFAULT_TIMEOUT
    if timeout <= 0:
        logger.warning(f"Non-positive GEMINI_TIMEOUT {raw!r}, using {DEFAULT_TIMEOUT}s")
        return DEFAULT_TIMEOUT
    return timeout
