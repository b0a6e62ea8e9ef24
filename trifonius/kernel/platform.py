"""DSH platforms and tenants.

A :class:`DshPlatform` describes one installation of the platform (its
domains, realm and token endpoint). A :class:`Tenant` is a tenant name on
one platform, together with the user id its services run as.

The list of known platforms is read from the bundled ``platforms.yaml`` or,
when ``TRIFONIUS_PLATFORMS_FILE`` is set, from that file.
"""

from __future__ import annotations

import os
from collections import Counter
from dataclasses import dataclass
from enum import StrEnum
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from trifonius.kernel.exceptions import ConfigurationError, ResourceNotFoundError
from trifonius.kernel.identifiers import TenantName
from trifonius.kernel.logging import get_logger

logger = get_logger(__name__)

ENV_VAR_PLATFORMS_FILE = "TRIFONIUS_PLATFORMS_FILE"


class CloudProvider(StrEnum):
    """Cloud service provider hosting a platform."""

    AWS = "aws"
    AZURE = "azure"


@dataclass(frozen=True, slots=True)
class DshPlatform:
    """One DSH platform and the endpoints derived from it."""

    name: str
    alias: str
    description: str
    is_production: bool
    cloud_provider: CloudProvider
    access_token_endpoint: str
    realm: str
    public_domain: str
    private_domain: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DshPlatform:
        try:
            return cls(
                name=data["name"],
                alias=data["alias"],
                description=data.get("description", ""),
                is_production=bool(data.get("is-production", False)),
                cloud_provider=CloudProvider(data["cloud-provider"]),
                access_token_endpoint=data["access-token-endpoint"],
                realm=data["realm"],
                public_domain=data["public-domain"],
                private_domain=data.get("private-domain"),
            )
        except (KeyError, ValueError, TypeError) as e:
            raise ConfigurationError(f"platform '{data.get('name')}'", str(e)) from e

    @property
    def client_id(self) -> str:
        return f"robot:{self.realm}"

    def tenant_client_id(self, tenant: str) -> str:
        return f"{self.client_id}:{tenant}"

    @property
    def console_domain(self) -> str:
        return f"console.{self.public_domain}"

    @property
    def console_url(self) -> str:
        return f"https://{self.console_domain}"

    @property
    def rest_api_domain(self) -> str:
        return f"api.{self.public_domain}"

    @property
    def rest_api_endpoint(self) -> str:
        return f"https://{self.rest_api_domain}/resources/v0"

    def internal_domain(self, tenant: str) -> str:
        return f"{tenant}.marathon.mesos"

    def tenant_public_domain(self, tenant: str) -> str:
        return f"{tenant}.{self.public_domain}"

    def tenant_monitoring_url(self, tenant: str) -> str:
        return f"https://monitoring-{self.tenant_public_domain(tenant)}"

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Tenant:
    """A tenant on a platform.

    Attributes
    ----------
    name : TenantName
        Validated tenant name
    platform : DshPlatform
        Platform the tenant lives on
    user : str | None
        User id (``"1903:1903"``) that the tenant's services run as
    """

    name: TenantName
    platform: DshPlatform
    user: str | None = None

    def __str__(self) -> str:
        return f"{self.name}@{self.platform.name}"


def _read_platforms(path: Path | None) -> list[dict[str, Any]]:
    if path is None:
        text = resources.files("trifonius.kernel").joinpath("platforms.yaml").read_text("utf-8")
        source = "bundled platforms list"
    else:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"platforms file '{path}'", str(e)) from e
        source = str(path)
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"platforms file '{source}'", str(e)) from e
    if not isinstance(data, list):
        raise ConfigurationError(f"platforms file '{source}'", "expected a list of platforms")
    logger.debug("Read {count} platforms from {source}", count=len(data), source=source)
    return data


def parse_platforms(data: list[dict[str, Any]]) -> list[DshPlatform]:
    """Parse and sort platform definitions.

    Raises
    ------
    ConfigurationError
        If a definition is incomplete, or names/aliases are not unique
    """
    platforms = [DshPlatform.from_dict(entry) for entry in data]
    counts = Counter(key for p in platforms for key in {p.name, p.alias})
    duplicates = sorted(key for key, count in counts.items() if count > 1)
    if duplicates:
        raise ConfigurationError(
            "platforms", f"duplicate names or aliases ({', '.join(duplicates)})"
        )
    return sorted(platforms, key=lambda p: p.name)


@lru_cache(maxsize=1)
def all_platforms() -> tuple[DshPlatform, ...]:
    """Return all known platforms, sorted by name."""
    env_file = os.getenv(ENV_VAR_PLATFORMS_FILE)
    return tuple(parse_platforms(_read_platforms(Path(env_file) if env_file else None)))


def platform(name_or_alias: str) -> DshPlatform:
    """Look up a platform by name or alias.

    Raises
    ------
    ResourceNotFoundError
        If no platform has that name or alias
    """
    known = all_platforms()
    for candidate in known:
        if name_or_alias in (candidate.name, candidate.alias):
            return candidate
    raise ResourceNotFoundError(
        "platform", name_or_alias, [f"{p.name}/{p.alias}" for p in known]
    )
