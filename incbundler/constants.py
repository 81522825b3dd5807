# Resolution
VENDOR_PREFIX = "node_modules/"
FALLBACK_SUFFIXES = (".js", ".json", "/index.js", "/index.json")

# Cache layout
STORE_FILENAME = "db.json"
BUNDLE_SUFFIX = ".js"
BUNDLE_SEPARATOR = "\n\n"

# Seconds of inactivity before the in-memory store is dropped
DEFAULT_IDLE_EVICTION_DELAY = 3.0
