"""Names of the resources the deployment creates, and the runtime host alias."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass

from . import constants

NIP_IO_DOMAIN = "nip.io"


@dataclass(frozen=True)
class LoadBalancerNames:
    """Resource names for the external HTTPS load balancer"""

    address: str = constants.ADDRESS_NAME
    certificate: str = constants.SSL_CERTIFICATE_NAME
    neg: str = constants.NEG_NAME
    backend_service: str = constants.BACKEND_SERVICE_NAME
    url_map: str = constants.URL_MAP_NAME
    https_proxy: str = constants.HTTPS_PROXY_NAME
    forwarding_rule: str = constants.FORWARDING_RULE_NAME


def runtime_host_alias(environment_group: str, runtime_ip: str) -> str:
    """
    Build the nip.io host alias for the load balancer IP.

    Example: sample-environment-group.34-1-2-3.nip.io
    """
    try:
        address = ipaddress.IPv4Address(runtime_ip.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid runtime IP address: {runtime_ip!r}") from exc
    dashed = str(address).replace(".", "-")
    return f"{environment_group}.{dashed}.{NIP_IO_DOMAIN}"
