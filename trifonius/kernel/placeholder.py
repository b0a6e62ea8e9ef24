"""Placeholder templates.

Configuration strings may contain ``${NAME}`` markers where ``NAME`` is one of
the :class:`Placeholder` tags. Markers are substituted from a
:data:`TemplateMapping` built once per tenant. Substitution is a single pass:
values are never re-scanned. Text that only looks like a marker (``{TENANT}``,
``${TENANT``) is literal.

Examples
--------
>>> from trifonius.kernel.placeholder import Placeholder, resolve_template
>>> resolve_template("abcd${TENANT}def", {Placeholder.TENANT: "tenant"})
'abcdtenantdef'
"""

from __future__ import annotations

import random
import re
import uuid
from collections.abc import Iterable, Mapping
from enum import StrEnum
from typing import TYPE_CHECKING

from trifonius.kernel.exceptions import (
    PlaceholderNotAllowedError,
    UnknownPlaceholderError,
    UnresolvedPlaceholderError,
)

if TYPE_CHECKING:
    from trifonius.kernel.platform import Tenant

TEMPLATE_PATTERN = re.compile(r"\$\{([A-Z][A-Z0-9_]*)\}")


class Placeholder(StrEnum):
    """Closed set of substitution keys available to templates."""

    APP_DOMAIN = "APP_DOMAIN"
    CONSOLE_URL = "CONSOLE_URL"
    DSH_INTERNAL_DOMAIN = "DSH_INTERNAL_DOMAIN"
    MONITORING_URL = "MONITORING_URL"
    PLATFORM = "PLATFORM"
    PUBLIC_VHOSTS_DOMAIN = "PUBLIC_VHOSTS_DOMAIN"
    RANDOM = "RANDOM"
    RANDOM_UUID = "RANDOM_UUID"
    REALM = "REALM"
    REST_ACCESS_TOKEN_URL = "REST_ACCESS_TOKEN_URL"
    REST_API_URL = "REST_API_URL"
    TENANT = "TENANT"
    USER = "USER"

    @classmethod
    def from_tag(cls, text: str) -> Placeholder:
        """Look up a placeholder by its tag text.

        Raises
        ------
        UnknownPlaceholderError
            If ``text`` is not a defined tag
        """
        try:
            return cls(text)
        except ValueError:
            raise UnknownPlaceholderError(text) from None


TemplateMapping = dict[Placeholder, str]


def resolve_template(template: str, mapping: Mapping[Placeholder, str]) -> str:
    """Substitute every ``${NAME}`` marker in ``template``.

    Parameters
    ----------
    template : str
        Template text
    mapping : Mapping[Placeholder, str]
        Values for the placeholders

    Returns
    -------
    str
        The resolved text

    Raises
    ------
    UnknownPlaceholderError
        If a marker names an undefined tag
    UnresolvedPlaceholderError
        If a marker names a tag without a value in ``mapping``
    """
    parts: list[str] = []
    last_end = 0
    for match in TEMPLATE_PATTERN.finditer(template):
        parts.append(template[last_end : match.start()])
        placeholder = Placeholder.from_tag(match.group(1))
        try:
            parts.append(mapping[placeholder])
        except KeyError:
            raise UnresolvedPlaceholderError(placeholder.value) from None
        last_end = match.end()
    parts.append(template[last_end:])
    return "".join(parts)


def validate_template(template: str, allowed: Iterable[Placeholder]) -> None:
    """Check that ``template`` only uses placeholders from ``allowed``.

    Raises
    ------
    UnknownPlaceholderError
        If a marker names an undefined tag
    PlaceholderNotAllowedError
        If a marker names a tag outside ``allowed``
    """
    allowed_set = frozenset(allowed)
    for placeholder in placeholders_in(template):
        if placeholder not in allowed_set:
            raise PlaceholderNotAllowedError(placeholder.value)


def placeholders_in(template: str) -> list[Placeholder]:
    """List the placeholders referenced by well-formed markers, in order."""
    return [Placeholder.from_tag(m.group(1)) for m in TEMPLATE_PATTERN.finditer(template)]


def template_mapping(tenant: Tenant) -> TemplateMapping:
    """Build the template mapping for a tenant.

    ``RANDOM`` and ``RANDOM_UUID`` are generated on every call, so reuse the
    returned mapping when consistent random values are needed.
    """
    platform = tenant.platform
    name = str(tenant.name)
    mapping: TemplateMapping = {
        Placeholder.APP_DOMAIN: platform.tenant_public_domain(name),
        Placeholder.CONSOLE_URL: platform.console_url,
        Placeholder.DSH_INTERNAL_DOMAIN: platform.internal_domain(name),
        Placeholder.MONITORING_URL: platform.tenant_monitoring_url(name),
        Placeholder.PLATFORM: platform.name,
        Placeholder.PUBLIC_VHOSTS_DOMAIN: platform.public_domain,
        Placeholder.RANDOM: format(random.randint(0x10000000, 0xFFFFFFFF), "x"),
        Placeholder.RANDOM_UUID: str(uuid.uuid4()),
        Placeholder.REALM: platform.realm,
        Placeholder.REST_ACCESS_TOKEN_URL: platform.access_token_endpoint,
        Placeholder.REST_API_URL: platform.rest_api_endpoint,
        Placeholder.TENANT: name,
    }
    if tenant.user is not None:
        mapping[Placeholder.USER] = tenant.user
    return mapping


__all__ = [
    "TEMPLATE_PATTERN",
    "Placeholder",
    "TemplateMapping",
    "placeholders_in",
    "resolve_template",
    "template_mapping",
    "validate_template",
]
