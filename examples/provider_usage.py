"""
Example: Resolving configuration values from Vault with VaultConfigProvider.

This shows the two supported login methods and how a host uses the TTL
returned with each read to decide when to read again.
"""

import os
import time

from vaultconfig import ConfigException, VaultConfigProvider
from vaultconfig.core.logger import configure_root_logger

configure_root_logger("INFO")


# =============================================================================
# Example 1: Static token (VAULT_ADDR / VAULT_TOKEN from the environment)
# =============================================================================
provider = VaultConfigProvider()
provider.configure(
    {
        "max.retries": "3",                # ← Transport retries per read
        "retry.interval.ms": "500",        # ← Fixed wait between retries
        "secret.minimum.ttl.ms": "60000",  # ← TTL used when Vault reports no lease
    }
)

data = provider.get("secret/app/database", {"username", "password"})
print(f"Read keys {sorted(data.values)}; re-read in {data.ttl_ms} ms")


# =============================================================================
# Example 2: AppRole login
# =============================================================================
approle_provider = VaultConfigProvider()
approle_provider.configure(
    {
        "address": os.environ.get("VAULT_ADDR", "http://127.0.0.1:8200"),
        "login.by": "AppRole",
        "role.id": os.environ["VAULT_ROLE_ID"],
        "secret.id": os.environ["VAULT_SECRET_ID"],
        "prefix": "staging",               # ← Reads go to staging/<path>
    }
)


# =============================================================================
# Example 3: TTL-driven refresh loop in the host
# =============================================================================
def refresh_forever(path: str) -> None:
    while True:
        try:
            current = approle_provider.get(path)
            print(f"{path}: {len(current.values)} value(s)")
            time.sleep(current.ttl_ms / 1000)
        except ConfigException as e:
            # Read failures are per call; the provider stays usable.
            print(f"Read of {e.path} failed with status {e.status}; retrying in 5s")
            time.sleep(5)
