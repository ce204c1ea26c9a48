"""Constants used in business logic."""

from typing import Final

# Service identification
SERVICE_NAME: Final[str] = "Mockzure"
SERVICE_VERSION: Final[str] = "1.0.0"

# Default configuration file name and the environment variable that can
# override it
DEFAULT_CONFIGURATION_FILE: Final[str] = "mockzure.yaml"
CONFIGURATION_FILE_ENV_VAR: Final[str] = "MOCKZURE_CONFIG"

# Environment variable holding the log level name
LOG_LEVEL_ENV_VAR: Final[str] = "MOCKZURE_LOG_LEVEL"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"

DEFAULT_SERVICE_HOST: Final[str] = "localhost"
DEFAULT_SERVICE_PORT: Final[int] = 8090

# Directory with API descriptions, one subdirectory per API family
DEFAULT_SPECS_DIRECTORY: Final[str] = "mockzure-specs"

# HTTP methods recognized in API descriptions, in the order in which routes
# are emitted for a single path
ROUTE_METHODS: Final[tuple[str, ...]] = ("GET", "POST", "PUT", "DELETE", "PATCH")

# Methods also accepted by the catch-all route; HEAD is served by GET routes
EXTRA_DISPATCH_METHODS: Final[tuple[str, ...]] = ("HEAD", "OPTIONS")

# Wildcard accepted both as a resource scope and as a verb
PERMISSION_WILDCARD: Final[str] = "*"

# Verbs checked by the resource-management authorization gate
VERB_READ: Final[str] = "read"
VERB_WRITE: Final[str] = "write"
VERB_DELETE: Final[str] = "delete"

# Resource-management POST actions and the verb each one requires
ARM_ACTION_VERBS: Final[dict[str, str]] = {
    "start": "start",
    "poweroff": "stop",
    "deallocate": "stop",
    "stop": "stop",
    "restart": "restart",
}

# Graph permissions needed to read directory collections
GRAPH_USER_READ_PERMISSIONS: Final[frozenset[str]] = frozenset(
    {"User.Read.All", "Directory.Read.All"}
)
GRAPH_APPLICATION_READ_PERMISSIONS: Final[frozenset[str]] = frozenset(
    {"Application.Read.All", "Directory.Read.All"}
)

# Mock token formats; both are guessable by design and must never be used as
# real credentials
MOCK_ACCESS_TOKEN_PREFIX: Final[str] = "mock_access_token_"
MOCK_REFRESH_TOKEN_PREFIX: Final[str] = "mock_refresh_token_"
AUTHORIZATION_CODE_PREFIX: Final[str] = "code_"
TOKEN_TYPE_BEARER: Final[str] = "Bearer"
DEFAULT_TOKEN_LIFETIME: Final[int] = 3600

# Redeemed access tokens remembered for userinfo, oldest are forgotten first
MAX_USERINFO_SESSIONS: Final[int] = 1000

# OAuth2 protocol values
RESPONSE_TYPE_CODE: Final[str] = "code"
GRANT_TYPE_AUTHORIZATION_CODE: Final[str] = "authorization_code"
GRANT_TYPE_CLIENT_CREDENTIALS: Final[str] = "client_credentials"
DEFAULT_CALLER_SCOPES: Final[tuple[str, ...]] = ("openid", "profile", "email")
DEFAULT_SCOPES_SUPPORTED: Final[tuple[str, ...]] = (
    "openid",
    "profile",
    "email",
    "User.Read",
)
ID_TOKEN_SIGNING_ALGORITHM: Final[str] = "none"

# Profile used in identity assertions when the subject is not known
UNKNOWN_SUBJECT_EMAIL: Final[str] = "unknown@dev.local"
UNKNOWN_SUBJECT_NAME: Final[str] = "Unknown User"
UNKNOWN_SUBJECT_GIVEN_NAME: Final[str] = "Unknown"
UNKNOWN_SUBJECT_FAMILY_NAME: Final[str] = "User"

# OAuth2 error tokens
OAUTH_INVALID_REQUEST: Final[str] = "invalid_request"
OAUTH_INVALID_CLIENT: Final[str] = "invalid_client"
OAUTH_INVALID_GRANT: Final[str] = "invalid_grant"
OAUTH_UNSUPPORTED_GRANT_TYPE: Final[str] = "unsupported_grant_type"
OAUTH_UNSUPPORTED_RESPONSE_TYPE: Final[str] = "unsupported_response_type"
OAUTH_UNAUTHORIZED_CLIENT: Final[str] = "unauthorized_client"

# Error codes used in resource-management and directory error payloads
ARM_NOT_FOUND_CODE: Final[str] = "ResourceNotFound"
ARM_FORBIDDEN_CODE: Final[str] = "AuthorizationFailed"
GRAPH_NOT_FOUND_CODE: Final[str] = "ItemNotFound"
GRAPH_FORBIDDEN_CODE: Final[str] = "Authorization_RequestDenied"
UNAUTHORIZED_CODE: Final[str] = "AuthenticationFailed"
METHOD_NOT_ALLOWED_CODE: Final[str] = "MethodNotAllowed"
INTERNAL_ERROR_CODE: Final[str] = "InternalServerError"

GRAPH_USERS_CONTEXT: Final[str] = (
    "https://graph.microsoft.com/v1.0/$metadata#users"
)
GRAPH_SERVICE_PRINCIPALS_CONTEXT: Final[str] = (
    "https://graph.microsoft.com/v1.0/$metadata#servicePrincipals"
)

ARM_VIRTUAL_MACHINE_TYPE: Final[str] = "Microsoft.Compute/virtualMachines"
ARM_RESOURCE_GROUP_TYPE: Final[str] = "Microsoft.Resources/resourceGroups"
ARM_DEFAULT_SUBSCRIPTION: Final[str] = "00000000-0000-0000-0000-000000000000"

# Query value that requests the expanded instance view of a VM
INSTANCE_VIEW_EXPAND: Final[str] = "instanceView"
