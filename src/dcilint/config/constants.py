"""Fixed vocabulary for the DCI conventions.

These values are part of the convention itself and are not user-configurable.
Naming regex defaults live here so models.py and the tests share one source.
"""

# Doc-comment tags (compared lowercase, without the leading "@")
CONTEXT_TAGS: frozenset[str] = frozenset({"context", "dci", "dcicontext"})
IGNORE_ROLE_TAGS: frozenset[str] = frozenset(
    {"norole", "nodcirole", "ignorerole", "ignoredcirole"}
)
LIST_CALLS_IN_TAG = "listcallsin"
LIST_CALLS_TO_TAG = "listcallsto"

# Default naming conventions
DEFAULT_ROLE_FORMAT = r"^[a-zA-Z0-9]+$"
DEFAULT_ROLE_METHOD_FORMAT = r"^([a-zA-Z0-9]+)_+([a-zA-Z0-9]+)$"

# Contract-call marker for "$this->role[...]" access
ARRAY_MARKER = "__ARRAY"

# Exported graph groups and ids
CONTEXT_GROUP = "__CONTEXT"
ROLE_INTERFACE_SUFFIX = "_RI"

# Project files
PROJECT_CONFIG_NAME = ".dcilint.yaml"
SOURCE_EXTENSIONS: frozenset[str] = frozenset({".php"})
