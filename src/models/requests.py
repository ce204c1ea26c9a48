"""Models for REST API requests."""

from typing import Optional

from pydantic import BaseModel, Field, SecretStr

import constants
from models.config import RegisteredCaller


class AppRegistrationRequest(BaseModel):
    """Model representing a request to register an OAuth2 client.

    Attributes:
        client_id: Client identifier, required.
        client_secret: Optional client secret.
        redirect_uris: Allowed redirect targets, empty list accepts any.
        scopes: Scopes the client may request.
        name: Human readable name.

    Example:
        ```python
        request = AppRegistrationRequest(
            client_id="my-spa",
            redirect_uris=["http://localhost:3000/callback"],
        )
        ```
    """

    # presence of client_id is checked by the endpoint, which answers with
    # an OAuth2 error instead of a validation error
    client_id: str = Field(
        "",
        description="Client identifier",
        examples=["my-spa"],
    )

    client_secret: SecretStr = Field(
        SecretStr(""),
        description="Client secret",
    )

    redirect_uris: list[str] = Field(
        default_factory=list,
        description="Allowed redirect targets",
        examples=[["http://localhost:3000/callback"]],
    )

    scopes: Optional[list[str]] = Field(
        None,
        description="Scopes the client may request, openid, profile and email "
        "when not specified",
        examples=[["openid", "profile"]],
    )

    name: Optional[str] = Field(
        None,
        description="Human readable client name",
        examples=["My SPA"],
    )

    model_config = {
        "extra": "forbid",
        "json_schema_extra": {
            "examples": [
                {
                    "client_id": "my-spa",
                    "client_secret": "dev-secret",
                    "redirect_uris": ["http://localhost:3000/callback"],
                    "scopes": ["openid", "profile", "email"],
                    "name": "My SPA",
                },
            ]
        },
    }

    def to_caller(self) -> RegisteredCaller:
        """Convert the request into a caller registration."""
        return RegisteredCaller(
            client_id=self.client_id,
            client_secret=self.client_secret,
            redirect_uris=self.redirect_uris,
            scopes=self.scopes or list(constants.DEFAULT_CALLER_SCOPES),
            name=self.name,
        )
