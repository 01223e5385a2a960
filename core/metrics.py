"""
Prometheus metrics for the license key service.
"""

from prometheus_client import Counter

license_keys_generated_total = Counter(
    "license_keys_generated_total",
    "Total license keys generated",
)

license_key_collisions_total = Counter(
    "license_key_collisions_total",
    "Generated license values rejected by the store as duplicates",
)

license_keys_activated_total = Counter(
    "license_keys_activated_total",
    "Total license keys activated",
    ["chained"],
)

license_key_validations_total = Counter(
    "license_key_validations_total",
    "License key validation results",
    ["result"],
)
