"""
Logfire instrumentation for the generation backend.
"""
import os

import logfire

from config.settings import get_settings

_configured = False
_instrumented = False


def configure_logfire(force: bool = False) -> bool:
    """
    Configure Logfire when a token is available.

    Args:
        force: Force reconfiguration even if already configured

    Returns:
        bool: True if Logfire is configured
    """
    global _configured

    if _configured and not force:
        return True

    token = get_settings().LOGFIRE_TOKEN
    if not token:
        # Silently disabled without a token
        return False

    os.environ['LOGFIRE_CONSOLE_NO_SHOW'] = '1'
    logfire.configure(
        token=token,
        service_name="briefdeck",
        service_version=os.getenv("APP_VERSION", "dev"),
        console=False,
    )
    _configured = True
    return True


def is_configured() -> bool:
    """Check if Logfire is configured."""
    return _configured


def instrument_agents() -> bool:
    """Instrument pydantic-ai agents once, if Logfire is configured."""
    global _instrumented

    if _instrumented:
        return True

    if not configure_logfire():
        return False

    # Instruments every pydantic-ai Agent run, including structured outputs
    logfire.instrument_pydantic_ai()
    logfire.info("pydantic-ai instrumentation enabled")
    _instrumented = True
    return True
