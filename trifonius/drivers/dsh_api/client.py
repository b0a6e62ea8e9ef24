"""DSH resource management API driver using httpx.AsyncClient.

Implements the :class:`~trifonius.kernel.ports.PlatformClient` port on top of
the platform's REST API. Requests are authenticated with a bearer token that
:class:`DshApiClientFactory` fetches with the OAuth client credentials grant
(client id ``robot:<realm>:<tenant>``, client secret from configuration).
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

import httpx

from trifonius.kernel.exceptions import PlatformNotFoundError, RemoteError
from trifonius.kernel.logging import get_logger

if TYPE_CHECKING:
    from trifonius.kernel.platform import Tenant

logger = get_logger(__name__)

# Refresh tokens this many seconds before they expire
_TOKEN_EXPIRY_MARGIN = 10.0

# Instance count of a stopped service, restored on start
STOPPED_INSTANCES_ENV = "TRIFONIUS_STOPPED_INSTANCES"


def _stopped_instances(service_name: str, env: dict[str, Any]) -> int:
    value = env.get(STOPPED_INSTANCES_ENV)
    if value is None:
        return 1
    try:
        return max(int(value), 1)
    except ValueError:
        logger.warning(
            "Ignoring invalid {key}={value} on {service}",
            key=STOPPED_INSTANCES_ENV,
            value=value,
            service=service_name,
        )
        return 1


class DshApiClient:
    """Platform client for one tenant, bound to one access token.

    Parameters
    ----------
    http : httpx.AsyncClient
        Client with ``base_url`` set to the platform's REST API endpoint
    tenant : str
        Tenant name used in the allocation paths
    token : str
        Bearer token for the tenant
    """

    def __init__(self, http: httpx.AsyncClient, tenant: str, token: str) -> None:
        self._http = http
        self._tenant = tenant
        self._headers = {"Authorization": f"Bearer {token}"}

    @property
    def tenant(self) -> str:
        return self._tenant

    def _application_path(self, service_name: str, resource: str) -> str:
        return f"/allocation/{self._tenant}/application/{service_name}/{resource}"

    async def _request(
        self,
        operation: str,
        target: str,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        logger.debug("{method} {path}", method=method, path=path)
        try:
            response = await self._http.request(method, path, json=json, headers=self._headers)
        except httpx.HTTPError as e:
            raise RemoteError(operation, f"{type(e).__name__}: {e}") from e
        if response.status_code == 404:
            raise PlatformNotFoundError(operation, target)
        if not response.is_success:
            raise RemoteError(
                operation, f"HTTP {response.status_code}: {response.text}", response.status_code
            )
        return response

    @staticmethod
    def _json(operation: str, response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise RemoteError(operation, f"invalid JSON response: {e}") from e
        if not isinstance(body, dict):
            raise RemoteError(operation, f"expected a JSON object, got {type(body).__name__}")
        return body

    async def _configuration(self, operation: str, service_name: str) -> dict[str, Any]:
        response = await self._request(
            operation, service_name, "GET", self._application_path(service_name, "configuration")
        )
        return self._json(operation, response)

    async def _put_configuration(
        self, operation: str, service_name: str, configuration: dict[str, Any]
    ) -> None:
        await self._request(
            operation,
            service_name,
            "PUT",
            self._application_path(service_name, "configuration"),
            json=configuration,
        )

    async def deploy_service(self, service_name: str, configuration: dict[str, Any]) -> None:
        await self._put_configuration("deploy service", service_name, configuration)

    async def start_service(self, service_name: str) -> None:
        """Scale a stopped service back to the instance count it was stopped at."""
        configuration = await self._configuration("start service", service_name)
        if configuration.get("instances", 0) != 0:
            return
        env = configuration.get("env") or {}
        started = {**configuration, "instances": _stopped_instances(service_name, env)}
        if STOPPED_INSTANCES_ENV in env:
            started["env"] = {k: v for k, v in env.items() if k != STOPPED_INSTANCES_ENV}
        await self._put_configuration("start service", service_name, started)

    async def stop_service(self, service_name: str) -> None:
        """Scale a service to zero instances, remembering its instance count."""
        configuration = await self._configuration("stop service", service_name)
        instances = configuration.get("instances", 0)
        if instances == 0:
            return
        env = {**(configuration.get("env") or {}), STOPPED_INSTANCES_ENV: str(instances)}
        await self._put_configuration(
            "stop service", service_name, {**configuration, "env": env, "instances": 0}
        )

    async def undeploy_service(self, service_name: str) -> None:
        await self._request(
            "undeploy service",
            service_name,
            "DELETE",
            self._application_path(service_name, "configuration"),
        )

    async def service_status(self, service_name: str) -> dict[str, Any]:
        response = await self._request(
            "service status", service_name, "GET", self._application_path(service_name, "status")
        )
        return self._json("service status", response)

    async def topic_status(self, topic_id: str) -> dict[str, Any]:
        response = await self._request(
            "topic status", topic_id, "GET", f"/allocation/{self._tenant}/topic/{topic_id}/status"
        )
        return self._json("topic status", response)


class DshApiClientFactory:
    """Creates :class:`DshApiClient` instances with a cached access token.

    Parameters
    ----------
    tenant : Tenant
        Tenant (and platform) to connect to
    secret : str
        Client secret of the tenant's robot account
    timeout : float
        Request timeout in seconds (default: 30.0)

    Examples
    --------
    Basic usage::

        factory = DshApiClientFactory(Tenant(TenantName("greenbox-dev"), platform("nplz")), secret)
        client = await factory.client()
        status = await client.service_status("pipeline-filter")
    """

    def __init__(self, tenant: Tenant, secret: str, timeout: float = 30.0) -> None:
        self.tenant = tenant
        self._secret = secret
        self._timeout = timeout
        self._http: httpx.AsyncClient | None = None
        self._token_lock: asyncio.Lock | None = None
        self._token: str | None = None
        self._token_expires_at = 0.0
        # Hook for testing: inject a custom transport
        self._transport: httpx.AsyncBaseTransport | None = None

    def _get_http(self) -> httpx.AsyncClient:
        """Lazily create the httpx client on first use."""
        if self._http is None:
            kwargs: dict[str, Any] = {
                "base_url": self.tenant.platform.rest_api_endpoint,
                "timeout": self._timeout,
            }
            if self._transport is not None:
                kwargs["transport"] = self._transport
            self._http = httpx.AsyncClient(**kwargs)
        return self._http

    async def _fetch_token(self) -> str:
        platform = self.tenant.platform
        client_id = platform.tenant_client_id(str(self.tenant.name))
        logger.debug("Fetching access token for {client_id}", client_id=client_id)
        try:
            response = await self._get_http().post(
                platform.access_token_endpoint,
                data={
                    "grant_type": "client_credentials",
                    "client_id": client_id,
                    "client_secret": self._secret,
                },
            )
        except httpx.HTTPError as e:
            raise RemoteError("fetch access token", f"{type(e).__name__}: {e}") from e
        if not response.is_success:
            raise RemoteError(
                "fetch access token",
                f"HTTP {response.status_code} for {client_id}",
                response.status_code,
            )
        try:
            body = response.json()
            token = body["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise RemoteError("fetch access token", "response has no access token") from e
        self._token_expires_at = time.monotonic() + float(body.get("expires_in", 60))
        return token

    def _token_valid(self) -> bool:
        return (
            self._token is not None
            and time.monotonic() < self._token_expires_at - _TOKEN_EXPIRY_MARGIN
        )

    async def client(self) -> DshApiClient:
        if self._token_lock is None:
            self._token_lock = asyncio.Lock()
        async with self._token_lock:
            if not self._token_valid():
                self._token = await self._fetch_token()
            token = self._token
        assert token is not None
        return DshApiClient(self._get_http(), str(self.tenant.name), token)

    async def aclose(self) -> None:
        """Close the underlying httpx client and release connection pool resources.

        The token is kept; a new httpx client is created on next use.
        """
        self._token_lock = None
        if self._http is not None:
            await self._http.aclose()
            self._http = None
