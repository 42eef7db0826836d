"""gcloud wrapper for the load balancer, certificate and network resources."""

from __future__ import annotations

from .command_runner import CommandRunner
from .exceptions import CommandOutputError

GCLOUD = "gcloud"


class GcloudCli:
    """Calls gcloud against a single project"""

    def __init__(self, runner: CommandRunner, project: str):
        self.runner = runner
        self.project = project

    def _args(self, *args: str) -> list[str]:
        return [GCLOUD, *args, f"--project={self.project}", "--quiet"]

    def _run(self, *args: str) -> str:
        return self.runner.run(self._args(*args))

    def print_access_token(self) -> str:
        """Return a bearer token for the active gcloud account"""
        token = self.runner.run([GCLOUD, "auth", "print-access-token"]).strip()
        if not token:
            raise CommandOutputError(f"{GCLOUD} auth print-access-token", "empty token")
        return token

    def enable_service(self, service: str) -> None:
        self._run("services", "enable", service)

    def create_global_address(self, name: str) -> None:
        """Reserve a global IPv4 address"""
        self._run("compute", "addresses", "create", name, "--ip-version=IPV4", "--global")

    def describe_global_address(self, name: str) -> str:
        """Return the IP of a reserved global address"""
        address = self._run(
            "compute", "addresses", "describe", name, "--format=get(address)", "--global"
        ).strip()
        if not address:
            raise CommandOutputError(f"{GCLOUD} compute addresses describe {name}", "no address")
        return address

    def create_ssl_certificate(self, name: str, domains: str) -> None:
        """Create a Google-managed SSL certificate"""
        self._run("compute", "ssl-certificates", "create", name, f"--domains={domains}")

    def describe_ssl_certificate(self, name: str) -> dict:
        """Return the certificate resource as a dict"""
        response = self.runner.run_json(
            self._args("compute", "ssl-certificates", "describe", name, "--format=json")
        )
        if not isinstance(response, dict):
            raise CommandOutputError(f"{GCLOUD} compute ssl-certificates describe {name}", "expected a JSON object")
        return response

    def create_psc_neg(  # pylint: disable=too-many-arguments
        self, name: str, target_service: str, region: str, network: str, subnet: str
    ) -> None:
        """Create a Private Service Connect network endpoint group"""
        self._run(
            "compute",
            "network-endpoint-groups",
            "create",
            name,
            "--network-endpoint-type=private-service-connect",
            f"--psc-target-service={target_service}",
            f"--region={region}",
            f"--network={network}",
            f"--subnet={subnet}",
        )

    def create_backend_service(self, name: str) -> None:
        """Create a global external managed HTTPS backend service"""
        self._run(
            "compute",
            "backend-services",
            "create",
            name,
            "--load-balancing-scheme=EXTERNAL_MANAGED",
            "--protocol=HTTPS",
            "--global",
        )

    def add_backend(self, backend_service: str, neg: str, neg_region: str) -> None:
        """Add a regional NEG to a global backend service"""
        self._run(
            "compute",
            "backend-services",
            "add-backend",
            backend_service,
            f"--network-endpoint-group={neg}",
            f"--network-endpoint-group-region={neg_region}",
            "--global",
        )

    def create_url_map(self, name: str, default_service: str) -> None:
        self._run("compute", "url-maps", "create", name, f"--default-service={default_service}")

    def create_https_proxy(self, name: str, url_map: str, certificate: str) -> None:
        self._run(
            "compute",
            "target-https-proxies",
            "create",
            name,
            f"--url-map={url_map}",
            f"--ssl-certificates={certificate}",
        )

    def create_forwarding_rule(self, name: str, address: str, https_proxy: str) -> None:
        """Create the global forwarding rule on port 443"""
        self._run(
            "compute",
            "forwarding-rules",
            "create",
            name,
            "--load-balancing-scheme=EXTERNAL_MANAGED",
            "--network-tier=PREMIUM",
            f"--address={address}",
            "--global",
            f"--target-https-proxy={https_proxy}",
            "--ports=443",
        )
