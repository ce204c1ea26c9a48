"""Models for REST API responses."""

from typing import Any, ClassVar, Optional

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from pydantic_core import SchemaError

import constants
from models.config import RegisteredCaller

UNAUTHORIZED_DESCRIPTION = "Unauthorized"
FORBIDDEN_DESCRIPTION = "Permission denied"
NOT_FOUND_DESCRIPTION = "Resource not found"
METHOD_NOT_ALLOWED_DESCRIPTION = "Method not allowed"
INTERNAL_SERVER_ERROR_DESCRIPTION = "Internal server error"
OAUTH_ERROR_DESCRIPTION = "OAuth2 protocol error"


class AbstractSuccessfulResponse(BaseModel):
    """Base class for all successful response models."""

    @classmethod
    def openapi_response(cls) -> dict[str, Any]:
        """Generate FastAPI response dict with a single example from model_config."""
        schema = cls.model_json_schema()
        model_examples = schema.get("examples")
        if not model_examples:
            raise SchemaError(f"Examples not found in {cls.__name__}")
        example_value = model_examples[0]
        content = {"application/json": {"example": example_value}}

        return {
            "description": "Successful response",
            "model": cls,
            "content": content,
        }


class LivenessResponse(AbstractSuccessfulResponse):
    """Model representing a response to a liveness request.

    Attributes:
        alive: If app is alive.
    """

    alive: bool = Field(
        ...,
        description="Flag indicating that the app is alive",
        examples=[True, False],
    )

    model_config = {"json_schema_extra": {"examples": [{"alive": True}]}}


class ReadinessResponse(AbstractSuccessfulResponse):
    """Model representing a response to a readiness request.

    Attributes:
        ready: If service is ready.
        reason: The reason for the readiness.
        routes: Number of routes compiled from API descriptions.
    """

    ready: bool = Field(..., description="Flag indicating if service is ready")
    reason: str = Field(..., description="The reason for the readiness")
    routes: int = Field(..., description="Number of spec-driven routes")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"ready": True, "reason": "Service is ready", "routes": 42},
            ]
        }
    }


class StatisticsResponse(AbstractSuccessfulResponse):
    """Counters of mock data."""

    total_vms: int = Field(..., description="Number of virtual machines")
    running_vms: int = Field(..., description="Number of running virtual machines")
    stopped_vms: int = Field(..., description="Number of other virtual machines")
    total_users: int = Field(..., description="Number of directory users")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"total_vms": 3, "running_vms": 2, "stopped_vms": 1, "total_users": 4},
            ]
        }
    }


class AppRegistrationResponse(AbstractSuccessfulResponse):
    """Registered OAuth2 client; the secret is never returned."""

    client_id: str = Field(..., description="Client identifier")
    redirect_uris: list[str] = Field(..., description="Allowed redirect targets")
    scopes: list[str] = Field(..., description="Scopes the client may request")
    name: Optional[str] = Field(None, description="Human readable client name")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "client_id": "my-spa",
                    "redirect_uris": ["http://localhost:3000/callback"],
                    "scopes": ["openid", "profile", "email"],
                    "name": "My SPA",
                }
            ]
        }
    }

    @classmethod
    def from_caller(cls, caller: RegisteredCaller) -> "AppRegistrationResponse":
        """Create response from registered caller."""
        return cls(
            client_id=caller.client_id,
            redirect_uris=list(caller.redirect_uris),
            scopes=list(caller.scopes),
            name=caller.name,
        )


class AppRegistrationListResponse(AbstractSuccessfulResponse):
    """List of registered OAuth2 clients."""

    value: list[AppRegistrationResponse] = Field(..., description="Registrations")
    count: int = Field(..., description="Number of registrations")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "value": [
                        {
                            "client_id": "my-spa",
                            "redirect_uris": [],
                            "scopes": ["openid"],
                            "name": None,
                        }
                    ],
                    "count": 1,
                }
            ]
        }
    }


class DiscoveryResponse(AbstractSuccessfulResponse):
    """OpenID provider metadata."""

    issuer: str
    authorization_endpoint: str
    token_endpoint: str
    userinfo_endpoint: str
    response_types_supported: list[str]
    id_token_signing_alg_values_supported: list[str]
    scopes_supported: list[str]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "issuer": "http://localhost:8090",
                    "authorization_endpoint": "http://localhost:8090/oauth2/v2.0/authorize",
                    "token_endpoint": "http://localhost:8090/oauth2/v2.0/token",
                    "userinfo_endpoint": "http://localhost:8090/oidc/userinfo",
                    "response_types_supported": ["code"],
                    "id_token_signing_alg_values_supported": ["none"],
                    "scopes_supported": ["openid", "profile", "email", "User.Read"],
                }
            ]
        }
    }


class TokenResponse(AbstractSuccessfulResponse):
    """Token endpoint response; absent fields are left out of the body."""

    access_token: str
    token_type: str
    expires_in: int
    scope: Optional[str] = None
    refresh_token: Optional[str] = None
    id_token: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "access_token": "mock_access_token_my-app",
                    "token_type": "Bearer",
                    "expires_in": 3600,
                    "scope": "https://management.azure.com/.default",
                }
            ]
        }
    }


class UserInfoResponse(AbstractSuccessfulResponse):
    """Profile of the user behind an access token."""

    sub: str
    name: str
    email: str
    given_name: str
    family_name: str
    job_title: str
    department: str
    office_location: str
    roles: list[str]
    account_enabled: bool
    user_principal_name: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "sub": "user-1",
                    "name": "Alice Smith",
                    "email": "alice@example.com",
                    "given_name": "Alice",
                    "family_name": "Smith",
                    "job_title": "Engineer",
                    "department": "R&D",
                    "office_location": "Prague",
                    "roles": ["VM Operator"],
                    "account_enabled": True,
                    "user_principal_name": "alice@example.com",
                }
            ]
        }
    }


class ErrorDetail(BaseModel):
    """Nested detail model for error responses."""

    code: str = Field(..., description="Error code from the API family vocabulary")
    message: str = Field(..., description="Explanation of the error")


class AbstractErrorResponse(BaseModel):
    """
    Base class for resource-management and directory error responses.

    Attributes:
        status_code (int): HTTP status code for the error response.
        error (ErrorDetail): The error code and message.
    """

    status_code: int
    error: ErrorDetail

    def __init__(self, *, code: str, message: str, status_code: int):
        """Initialize an AbstractErrorResponse.

        Args:
            code: Error code such as ResourceNotFound.
            message: Explanation of the error.
            status_code: HTTP status code for the error response.
        """
        super().__init__(
            status_code=status_code, error=ErrorDetail(code=code, message=message)
        )

    @classmethod
    def get_description(cls) -> str:
        """Get the description from the class attribute or docstring."""
        return getattr(cls, "description", cls.__doc__ or "")

    @classmethod
    def openapi_response(cls, examples: Optional[list[str]] = None) -> dict[str, Any]:
        """Generate FastAPI response dict with examples from model_config."""
        schema = cls.model_json_schema()
        model_examples = schema.get("examples", [])

        named_examples: dict[str, Any] = {}
        for ex in model_examples:
            label = ex.get("label", None)
            if label is None:
                raise SchemaError(f"Example {ex} in {cls.__name__} has no label")
            if examples is None or label in examples:
                error = ex.get("error")
                if error is not None:
                    named_examples[label] = {"value": {"error": error}}

        content: dict[str, Any] = {
            "application/json": {"examples": named_examples or None}
        }

        return {
            "description": cls.get_description(),
            "model": cls,
            "content": content,
        }

    def to_response(self, headers: Optional[dict[str, str]] = None) -> JSONResponse:
        """Render the error as JSON response."""
        return JSONResponse(
            status_code=self.status_code,
            content={"error": self.error.model_dump()},
            headers=headers,
        )


class UnauthorizedResponse(AbstractErrorResponse):
    """401 Unauthorized - Missing or invalid credentials."""

    description: ClassVar[str] = UNAUTHORIZED_DESCRIPTION
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "label": "missing credentials",
                    "error": {
                        "code": constants.UNAUTHORIZED_CODE,
                        "message": "Credentials are required to perform 'write'",
                    },
                },
                {
                    "label": "invalid credentials",
                    "error": {
                        "code": constants.UNAUTHORIZED_CODE,
                        "message": "Invalid service principal credentials",
                    },
                },
            ]
        }
    }

    def __init__(self, *, cause: str):
        """Initialize UnauthorizedResponse."""
        super().__init__(
            code=constants.UNAUTHORIZED_CODE,
            message=cause,
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class ForbiddenResponse(AbstractErrorResponse):
    """403 Forbidden. Access denied."""

    description: ClassVar[str] = FORBIDDEN_DESCRIPTION
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "label": "resource group",
                    "error": {
                        "code": constants.ARM_FORBIDDEN_CODE,
                        "message": "The client 'app-1' does not have authorization "
                        "to perform 'delete' over scope 'rg-dev'",
                    },
                },
                {
                    "label": "directory",
                    "error": {
                        "code": constants.GRAPH_FORBIDDEN_CODE,
                        "message": "The client 'app-1' does not have authorization "
                        "to perform 'read' over scope 'users'",
                    },
                },
            ]
        }
    }

    def __init__(self, *, code: str, cause: str):
        """Initialize ForbiddenResponse."""
        super().__init__(
            code=code, message=cause, status_code=status.HTTP_403_FORBIDDEN
        )


class NotFoundResponse(AbstractErrorResponse):
    """404 Not Found - Resource does not exist."""

    description: ClassVar[str] = NOT_FOUND_DESCRIPTION
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "label": "virtual machine",
                    "error": {
                        "code": constants.ARM_NOT_FOUND_CODE,
                        "message": "virtual machine not found: vm-42",
                    },
                },
                {
                    "label": "user",
                    "error": {
                        "code": constants.GRAPH_NOT_FOUND_CODE,
                        "message": "user not found: bob@example.com",
                    },
                },
                {
                    "label": "route",
                    "error": {
                        "code": constants.ARM_NOT_FOUND_CODE,
                        "message": "No route matches GET /unknown",
                    },
                },
            ]
        }
    }

    def __init__(self, *, code: str, cause: str):
        """Initialize NotFoundResponse."""
        super().__init__(
            code=code, message=cause, status_code=status.HTTP_404_NOT_FOUND
        )


class MethodNotAllowedResponse(AbstractErrorResponse):
    """405 Method Not Allowed - Path exists, but not for this method."""

    description: ClassVar[str] = METHOD_NOT_ALLOWED_DESCRIPTION
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "label": "method",
                    "error": {
                        "code": constants.METHOD_NOT_ALLOWED_CODE,
                        "message": "Method PATCH is not allowed, allowed: GET, PUT",
                    },
                },
            ]
        }
    }

    def __init__(self, *, method: str, allowed: tuple[str, ...]):
        """Initialize MethodNotAllowedResponse."""
        super().__init__(
            code=constants.METHOD_NOT_ALLOWED_CODE,
            message=f"Method {method} is not allowed, allowed: {', '.join(allowed)}",
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        )


class InternalServerErrorResponse(AbstractErrorResponse):
    """500 Internal Server Error."""

    description: ClassVar[str] = INTERNAL_SERVER_ERROR_DESCRIPTION
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "label": "internal",
                    "error": {
                        "code": constants.INTERNAL_ERROR_CODE,
                        "message": "An unexpected error occurred while processing the request.",
                    },
                },
                {
                    "label": "unsupported operation",
                    "error": {
                        "code": constants.INTERNAL_ERROR_CODE,
                        "message": "Operation 'getJwks' is not supported by the mock service",
                    },
                },
            ]
        }
    }

    @classmethod
    def generic(cls) -> "InternalServerErrorResponse":
        """Create a generic InternalServerErrorResponse."""
        return cls(
            code=constants.INTERNAL_ERROR_CODE,
            cause="An unexpected error occurred while processing the request.",
        )

    @classmethod
    def unsupported_operation(cls, operation_id: str) -> "InternalServerErrorResponse":
        """Create response for operation the response mappers do not emulate."""
        return cls(
            code=constants.INTERNAL_ERROR_CODE,
            cause=f"Operation '{operation_id}' is not supported by the mock service",
        )

    def __init__(self, *, code: str, cause: str) -> None:
        """Initialize an InternalServerErrorResponse."""
        super().__init__(
            code=code,
            message=cause,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class OAuthErrorResponse(BaseModel):
    """OAuth2 error response of the identity endpoints."""

    description: ClassVar[str] = OAUTH_ERROR_DESCRIPTION

    status_code: int = Field(status.HTTP_400_BAD_REQUEST, exclude=True)
    error: str = Field(..., description="OAuth2 error token")
    error_description: str = Field(..., description="Explanation of the error")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"error": "invalid_grant", "error_description": "invalid code"},
            ]
        }
    }

    def to_response(self) -> JSONResponse:
        """Render the error as JSON response."""
        headers = None
        if self.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": f'Bearer error="{self.error}"'}
        return JSONResponse(
            status_code=self.status_code, content=self.model_dump(), headers=headers
        )
