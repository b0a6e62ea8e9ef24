"""The engine target: who deploys, and where.

An :class:`EngineTarget` pairs the active :class:`~trifonius.kernel.platform.Tenant`
with the :class:`~trifonius.kernel.ports.PlatformClientFactory` that yields
authenticated clients for it. Realizations and instances receive the target
explicitly; there is no ambient global target.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from trifonius.kernel.placeholder import TemplateMapping, template_mapping

if TYPE_CHECKING:
    from trifonius.kernel.platform import DshPlatform, Tenant
    from trifonius.kernel.ports import PlatformClient, PlatformClientFactory


@dataclass(frozen=True, slots=True)
class EngineTarget:
    """Active platform and tenant, plus the client factory for them."""

    client_factory: PlatformClientFactory

    @property
    def tenant(self) -> Tenant:
        return self.client_factory.tenant

    @property
    def platform(self) -> DshPlatform:
        return self.tenant.platform

    @property
    def tenant_name(self) -> str:
        return str(self.tenant.name)

    @property
    def user(self) -> str | None:
        return self.tenant.user

    def template_mapping(self) -> TemplateMapping:
        """Build a fresh template mapping (new random values) for this tenant."""
        return template_mapping(self.tenant)

    async def client(self) -> PlatformClient:
        """Return an authenticated platform client.

        Raises
        ------
        RemoteError
            If the client factory cannot authenticate
        """
        return await self.client_factory.client()

    def __str__(self) -> str:
        return str(self.tenant)
