"""
Constants for the internet exposure deployment.

Polling and timeouts:
- Apigee long-running operations are polled every 5 seconds for up to 10 minutes
- Managed SSL certificates are polled every 10 seconds for up to 1 hour
- Status queries may fail a few times in a row before the wait is abandoned
"""

# Environment variables that must be set (directly or via .env) before deploying
REQUIRED_ENV_VARS: tuple[str, ...] = ("PROJECT", "NETWORK", "SUBNET")

# Optional override for the .env file location
ENV_FILE_VAR: str = "EXPOSURE_ENV_FILE"

# Apigee operation polling
OPERATION_POLL_INTERVAL_SECONDS: int = 5
OPERATION_TIMEOUT_SECONDS: int = 600  # 10 minutes
OPERATION_FINISHED_STATE: str = "FINISHED"

# Managed certificate polling
CERTIFICATE_POLL_INTERVAL_SECONDS: int = 10
CERTIFICATE_TIMEOUT_SECONDS: int = 3600  # 1 hour
CERTIFICATE_ACTIVE_STATUS: str = "ACTIVE"

# Consecutive failed status queries tolerated while polling
STATUS_QUERY_RETRIES: int = 3

# Pause after the certificate turns ACTIVE so the load balancer picks it up
TLS_SETTLE_SECONDS: int = 30

# apigeecli installer
APIGEECLI_INSTALL_URL: str = "https://raw.githubusercontent.com/apigee/apigeecli/main/downloadLatest.sh"
APIGEECLI_HOME_DIRNAME: str = ".apigeecli"

# Apigee runtime defaults
DEFAULT_ENVIRONMENT_NAME: str = "sample-environment"
DEFAULT_ENVIRONMENT_GROUP_NAME: str = "sample-environment-group"

# Load balancer resource names
ADDRESS_NAME: str = "sample-apigee-vip"
SSL_CERTIFICATE_NAME: str = "sample-apigee-ssl-cert"
NEG_NAME: str = "sample-apigee-neg"
BACKEND_SERVICE_NAME: str = "sample-apigee-backend"
URL_MAP_NAME: str = "sample-apigee-urlmap"
HTTPS_PROXY_NAME: str = "sample-apigee-https-proxy"
FORWARDING_RULE_NAME: str = "sample-apigee-https-lb-rule"
