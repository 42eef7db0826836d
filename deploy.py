#!/usr/bin/env python3
"""
Expose an Apigee runtime instance to the internet.

Creates a sample Apigee environment and environment group, reserves a global
IP address, and fronts the instance with an external HTTPS load balancer
(managed SSL certificate + Private Service Connect NEG). Requires PROJECT,
NETWORK and SUBNET in the environment or a .env file.

This is a thin wrapper around the internet_exposure package.
"""
from __future__ import annotations

from internet_exposure.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
