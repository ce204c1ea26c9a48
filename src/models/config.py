"""Model with service configuration."""

from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
    PositiveInt,
    SecretStr,
)
from pydantic.alias_generators import to_camel
from typing_extensions import Self

import constants


class ConfigurationBase(BaseModel):
    """Base class for all configuration models that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class MockRecordBase(BaseModel):
    """Base class for mock data records.

    Records use the camelCase keys of the cloud APIs in configuration files,
    for example `resourceGroup` or `applicationId`. Unknown keys are ignored
    so configuration files written for older releases keep loading.
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class CORSConfiguration(ConfigurationBase):
    """CORS configuration.

    CORS or 'Cross-Origin Resource Sharing' refers to the situations when a
    frontend running in a browser has JavaScript code that communicates with a
    backend, and the backend is in a different 'origin' than the frontend.
    Browser based single page applications tested against the mock identity
    provider need it.

    Useful resources:

      - [CORS in FastAPI](https://fastapi.tiangolo.com/tutorial/cors/)
      - [Wikipedia article](https://en.wikipedia.org/wiki/Cross-origin_resource_sharing)
    """

    # not AnyHttpUrl: we need to support "*" that is not valid URL
    allow_origins: list[str] = Field(
        ["*"],
        title="Allow origins",
        description="A list of origins allowed for cross-origin requests. "
        "Use ['*'] to allow all origins.",
    )

    allow_credentials: bool = Field(
        False,
        title="Allow credentials",
        description="Indicate that cookies should be supported for cross-origin requests",
    )

    allow_methods: list[str] = Field(
        ["*"],
        title="Allow methods",
        description="A list of HTTP methods that should be allowed for "
        "cross-origin requests. You can use ['*'] to allow "
        "all standard methods.",
    )

    allow_headers: list[str] = Field(
        ["*"],
        title="Allow headers",
        description="A list of HTTP request headers that should be supported "
        "for cross-origin requests. You can use ['*'] to allow all headers.",
    )

    @model_validator(mode="after")
    def check_cors_configuration(self) -> Self:
        """Check CORS configuration."""
        # credentials are not allowed with wildcard origins per CORS/Fetch spec.
        # see https://fastapi.tiangolo.com/tutorial/cors/
        if self.allow_credentials and "*" in self.allow_origins:
            raise ValueError(
                "Invalid CORS configuration: allow_credentials can not be set to true when "
                "allow origins contains the '*' wildcard."
                "Use explicit origins or disable credentials."
            )
        return self


class ServiceConfiguration(ConfigurationBase):
    """Service configuration.

    Mockzure is a REST API service that accepts requests on a specified
    hostname and port. All three virtualized API families are served from
    the same port.
    """

    host: str = Field(
        constants.DEFAULT_SERVICE_HOST,
        title="Host",
        description="Service hostname",
    )

    port: PositiveInt = Field(
        constants.DEFAULT_SERVICE_PORT,
        title="Port",
        description="Service port",
    )

    workers: PositiveInt = Field(
        1,
        title="Number of workers",
        description="Number of Uvicorn worker processes to start. Authorization "
        "codes live in process memory, so only a single worker is supported.",
    )

    color_log: bool = Field(
        True,
        title="Color log",
        description="Enables colorized logging",
    )

    access_log: bool = Field(
        True,
        title="Access log",
        description="Enables logging of all access information",
    )

    cors: CORSConfiguration = Field(
        default_factory=CORSConfiguration,
        title="CORS configuration",
        description="Cross-Origin Resource Sharing configuration for cross-domain requests",
    )

    @model_validator(mode="after")
    def check_service_configuration(self) -> Self:
        """Check service configuration."""
        if self.port > 65535:
            raise ValueError("Port value should be less than 65536")
        if self.workers != 1:
            raise ValueError(
                "Only one worker is supported, authorization codes are kept "
                "in process memory"
            )
        return self


class SpecsConfiguration(ConfigurationBase):
    """API descriptions configuration.

    Resource-management and directory routes are compiled from OpenAPI and
    Swagger documents stored in one subdirectory per API family (`arm`,
    `graph` and `identity`).
    """

    enabled: bool = Field(
        True,
        title="Enabled",
        description="Compile routes from API descriptions",
    )

    directory: str = Field(
        constants.DEFAULT_SPECS_DIRECTORY,
        title="Directory",
        description="Directory with API descriptions",
    )


class AuthorizationConfiguration(ConfigurationBase):
    """Authorization gate configuration.

    Anonymous reads are always permitted for backward compatibility with
    clients that never sent credentials.
    """

    anonymous_writes: bool = Field(
        False,
        title="Anonymous writes",
        description="Permit requests without credentials to modify resources",
    )

    invalid_credentials_as_anonymous: bool = Field(
        True,
        title="Invalid credentials as anonymous",
        description="Treat malformed or unknown credentials as if no "
        "credentials were sent. When disabled such requests are rejected "
        "with 401.",
    )

    enforce_graph_permissions: bool = Field(
        True,
        title="Enforce Graph permissions",
        description="Require Graph permissions such as User.Read.All from "
        "authenticated service principals that read the directory",
    )


class IdentityConfiguration(ConfigurationBase):
    """Mock identity provider configuration."""

    issuer: Optional[str] = Field(
        None,
        title="Issuer",
        description="Fixed issuer URL. When not set, the issuer is derived "
        "from the Host and X-Forwarded-Proto headers of each request.",
    )

    token_lifetime: PositiveInt = Field(
        constants.DEFAULT_TOKEN_LIFETIME,
        title="Token lifetime",
        description="Lifetime of issued tokens in seconds",
    )

    scopes_supported: list[str] = Field(
        default_factory=lambda: list(constants.DEFAULT_SCOPES_SUPPORTED),
        title="Scopes supported",
        description="Scopes announced in the discovery document",
    )


class ResourceGroup(MockRecordBase):
    """Resource group served by the resource-management API."""

    id: str = ""
    name: str
    location: str = ""
    tags: dict[str, str] = Field(default_factory=dict)


class VirtualMachine(MockRecordBase):
    """Virtual machine served by the resource-management API.

    The `status` field holds the internal state (`running`, `stopped`, ...)
    from which the power-state code of the instance view is derived.
    """

    id: str = ""
    name: str
    resource_group: str = ""
    location: str = ""
    vm_size: str = ""
    os_type: str = ""
    provisioning_state: str = "Succeeded"
    power_state: str = ""
    status: str = ""
    tags: dict[str, str] = Field(default_factory=dict)
    owner: str = ""
    cost_center: str = ""
    environment: str = ""


class User(MockRecordBase):
    """Directory user, also used as the subject of interactive logins."""

    id: str
    display_name: str = ""
    user_principal_name: str = ""
    mail: str = ""
    job_title: str = ""
    department: str = ""
    office_location: str = ""
    user_type: str = ""
    account_enabled: bool = True
    roles: list[str] = Field(default_factory=list)


class ResourceGroupPermission(MockRecordBase):
    """Verbs granted on one resource group, or on all of them with `*`."""

    resource_group: str
    permissions: list[str] = Field(default_factory=list)


class ServiceAccount(MockRecordBase):
    """Service principal together with its secret.

    The secret is split off into a separate credential table when the mock
    context is built and never reaches a response.
    """

    id: str = ""
    application_id: str = Field(..., min_length=1)
    secret: SecretStr = SecretStr("")
    display_name: str = ""
    description: str = ""
    account_enabled: bool = True
    permissions: list[ResourceGroupPermission] = Field(default_factory=list)
    graph_permissions: list[str] = Field(default_factory=list)


class RegisteredCaller(BaseModel):
    """OAuth2 client registered with the mock identity provider.

    An empty list of redirect URIs accepts any redirect target.
    """

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(..., min_length=1, description="Client identifier")
    client_secret: SecretStr = Field(
        SecretStr(""), description="Client secret, never returned in responses"
    )
    redirect_uris: list[str] = Field(
        default_factory=list, description="Allowed redirect targets"
    )
    scopes: list[str] = Field(
        default_factory=lambda: list(constants.DEFAULT_CALLER_SCOPES),
        description="Scopes the client may request",
    )
    name: Optional[str] = Field(None, description="Human readable client name")


class Configuration(ConfigurationBase):
    """Global service configuration."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(
        constants.SERVICE_NAME,
        title="Service name",
        description="Name of the service",
    )

    service: ServiceConfiguration = Field(
        default_factory=ServiceConfiguration,
        title="Service configuration",
        description="This section contains Mockzure service configuration.",
    )

    specs: SpecsConfiguration = Field(
        default_factory=SpecsConfiguration,
        title="API descriptions",
        description="Location of the API descriptions routes are compiled from",
    )

    authorization: AuthorizationConfiguration = Field(
        default_factory=AuthorizationConfiguration,
        title="Authorization configuration",
        description="Behaviour of the service principal authorization gate",
    )

    identity: IdentityConfiguration = Field(
        default_factory=IdentityConfiguration,
        title="Identity configuration",
        description="Mock OIDC/OAuth2 identity provider settings",
    )

    resource_groups: list[ResourceGroup] = Field(
        default_factory=list,
        alias="resourceGroups",
        title="Resource groups",
    )

    vms: list[VirtualMachine] = Field(
        default_factory=list,
        title="Virtual machines",
    )

    users: list[User] = Field(
        default_factory=list,
        title="Users",
    )

    service_accounts: list[ServiceAccount] = Field(
        default_factory=list,
        alias="serviceAccounts",
        title="Service accounts",
    )

    apps: list[RegisteredCaller] = Field(
        default_factory=list,
        title="App registrations",
        description="OAuth2 clients registered at startup",
    )

    @model_validator(mode="after")
    def check_unique_identifiers(self) -> Self:
        """Check that service principals and users are uniquely identified."""
        application_ids = [sa.application_id for sa in self.service_accounts]
        if len(application_ids) != len(set(application_ids)):
            raise ValueError("Service account applicationId values must be unique")
        user_ids = [user.id for user in self.users]
        if len(user_ids) != len(set(user_ids)):
            raise ValueError("User id values must be unique")
        client_ids = [app.client_id for app in self.apps]
        if len(client_ids) != len(set(client_ids)):
            raise ValueError("App registration client_id values must be unique")
        return self

    def dump(self, filename: str = "configuration.json") -> None:
        """Dump actual configuration into JSON file."""
        with open(filename, "w", encoding="utf-8") as fout:
            fout.write(self.model_dump_json(indent=4, by_alias=True))
