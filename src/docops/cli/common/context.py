"""Application context management for the CLI."""

from dataclasses import dataclass

from docops.cli.common.exits import die
from docops.core.config import ApiConfig, ConfigError, get_client, load_config
from docops.core.session import DbSessionController


@dataclass
class SessionAppContext:
    """Application context holding the API configuration and session controller."""

    config: ApiConfig
    session: DbSessionController


def build_session_context(
    api_url: str | None,
    token: str | None,
) -> SessionAppContext:
    """Build and return the application context with API client and session.

    Args:
        api_url: Optional API base URL overriding $DOCOPS_API_URL.
        token: Optional bearer token overriding $DOCOPS_TOKEN.

    Returns:
        SessionAppContext: Context with a fresh (empty) session state.
    """
    try:
        config = load_config(api_url=api_url, token=token)
    except ConfigError as exc:
        die(str(exc), code=2)
    session = DbSessionController(
        get_client(config),
        full_refresh_on_create=config.full_refresh_on_create,
    )
    return SessionAppContext(config=config, session=session)
