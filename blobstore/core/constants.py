"""Core constants: setting names, targets, and shared literal values."""

# Setting names understood by SettingsProvider implementations
SETTING_CONNECTION_STRING = "blob_storage_connection_string"
SETTING_CONTAINER = "blob_storage_container"
SETTING_STORAGE_URL = "blob_storage_url"
SETTING_BASE_PATH = "blob_storage_base_path"
SETTING_DELETE_BATCH_SIZE = "delete_batch_size"

# Deployment targets
TARGET_SERVER = "server"
TARGET_BROWSER = "browser"
DEPLOYMENT_TARGETS = (TARGET_SERVER, TARGET_BROWSER)

AZURE_MAX_BATCH_SIZE = 256
DEFAULT_DELETE_BATCH_SIZE = 250

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Telemetry event name for adapter-level problems
TELEMETRY_EVENT_NAME = "AzureBlobStorage"
