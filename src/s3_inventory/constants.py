"""Constants for the S3 inventory."""

# Regions
DEFAULT_REGION = "us-east-1"

# GetBucketLocation still answers with legacy location constraints for some buckets
LEGACY_REGION_ALIASES = {
    "EU": "eu-west-1",
}

# Provider error codes that mean "not configured" rather than failure
ERROR_CODE_NO_POLICY = "NoSuchBucketPolicy"
ERROR_CODE_NO_ENCRYPTION = "ServerSideEncryptionConfigurationNotFoundError"

# Inventory phases
PHASE_LIST = "list_buckets"
PHASE_REGIONS = "resolve_regions"
PHASE_CLIENTS = "build_regional_clients"
PHASE_METADATA = "fetch_metadata"

# Bucket attributes fetched per bucket
ATTR_REGION = "region"
ATTR_POLICY = "policy"
ATTR_ENCRYPTION = "encryption"
ATTR_LOGGING = "logging"

# Configuration defaults
DEFAULT_MAX_WORKERS = 32
DEFAULT_MAX_POOL_CONNECTIONS = 50

SERVICE_NAME = "s3-inventory"
