"""Application context management for the CLI."""

from dataclasses import dataclass

import httpx

from cpops.cli.common.exits import die
from cpops.core.adapters.controlplane import ControlPlaneAdapter
from cpops.core.auth import AuthError, ClientConfig, get_client
from cpops.core.listing import ListingConfig


@dataclass
class CatalogAppContext:
    """Application context holding the control-plane client and adapter."""

    client: httpx.Client
    adapter: ControlPlaneAdapter
    listing: ListingConfig


def build_catalog_context(
    api_url: str | None = None, token: str | None = None
) -> CatalogAppContext:
    """Build the application context for catalog commands.

    Args:
        api_url: Optional API URL overriding $CPOPS_API_URL.
        token: Optional access token overriding $CPOPS_ACCESS_TOKEN.

    Returns:
        CatalogAppContext: Context with a configured client and adapter.
    """
    try:
        config = ClientConfig.from_env(api_url=api_url, access_token=token)
    except AuthError as exc:
        die(str(exc), code=1)
    client = get_client(config)
    return CatalogAppContext(
        client=client,
        adapter=ControlPlaneAdapter(client),
        listing=ListingConfig(),
    )
