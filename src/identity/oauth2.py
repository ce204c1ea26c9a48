"""OAuth2 authorization-code and client-credentials flows.

A login goes through three states: the authorize request without `user_id`
asks for interactive user selection (no state is kept), the authorize
request with `user_id` issues a single-use authorization code, and the
token request redeems the code. Redemption removes the code before the
response is built, so a code is never redeemed twice, not even by two
concurrent requests.

Every malformed request ends with `OAuthProtocolError`, which always maps
to a 4xx response.
"""

import secrets
import threading
from collections import OrderedDict
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi import status

import constants
from authentication.utils import (
    CredentialFormatError,
    decode_basic_credentials,
    split_authorization_header,
)
from identity.tokens import identity_claims, make_unsigned_jwt, split_display_name
from log import get_logger
from models.config import IdentityConfiguration, RegisteredCaller, User
from store.callers import CallerRegistry
from store.codes import AuthorizationCodeTable
from store.data_store import DataStore
from store.principals import CredentialTable, PrincipalDirectory

logger = get_logger(__name__)

ADMIN_PROFILE: Mapping[str, Any] = {
    "sub": "admin-user-12345",
    "name": "Admin User",
    "email": "admin@dev.local",
    "given_name": "Admin",
    "family_name": "User",
    "job_title": "System Administrator",
    "department": "IT",
    "office_location": "Headquarters",
    "roles": ["Global Administrator", "VM Administrator"],
    "account_enabled": True,
    "user_principal_name": "admin@dev.local",
}


class OAuthProtocolError(Exception):
    """Request violates the OAuth2 protocol.

    Attributes:
        error: OAuth2 error token such as `invalid_grant`.
        description: Human readable explanation.
        status_code: HTTP status code, 400 or 401.
    """

    def __init__(
        self,
        error: str,
        description: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ) -> None:
        """Initialize the exception."""
        super().__init__(f"{error}: {description}")
        self.error = error
        self.description = description
        self.status_code = status_code


@dataclass(frozen=True)
class UserSelectionPrompt:
    """Authorize request needs interactive selection of the user."""

    client_id: str
    redirect_uri: str
    response_type: str
    scope: str
    state: str
    users: tuple[User, ...]


@dataclass(frozen=True)
class AuthorizationRedirect:
    """Authorize request completed, client is redirected with the code."""

    location: str


@dataclass(frozen=True)
class TokenGrant:
    """Token endpoint response."""

    access_token: str
    token_type: str
    expires_in: int
    scope: Optional[str] = None
    refresh_token: Optional[str] = None
    id_token: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Return response body without absent fields."""
        return {key: value for key, value in asdict(self).items() if value is not None}


def append_query(url: str, params: Mapping[str, str]) -> str:
    """Append parameters to query of URL, keeping its existing parameters."""
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.extend(params.items())
    return urlunsplit(parts._replace(query=urlencode(query)))


def validate_redirect_uri(redirect_uri: str) -> None:
    """Check that redirect URI is an absolute URL.

    Raises:
        OAuthProtocolError: If the URI has no scheme or host.
    """
    try:
        parts = urlsplit(redirect_uri)
    except ValueError as e:
        raise OAuthProtocolError(
            constants.OAUTH_INVALID_REQUEST, "invalid redirect_uri"
        ) from e
    if not parts.scheme or not parts.netloc:
        raise OAuthProtocolError(constants.OAUTH_INVALID_REQUEST, "invalid redirect_uri")


class OAuth2StateMachine:
    """Mock identity provider state."""

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        codes: AuthorizationCodeTable,
        callers: CallerRegistry,
        principals: PrincipalDirectory,
        credentials: CredentialTable,
        data: DataStore,
        config: IdentityConfiguration,
    ) -> None:
        """Initialize the state machine.

        Parameters:
            codes: Table of issued authorization codes.
            callers: Registered OAuth2 clients.
            principals: Service principals for the client-credentials grant.
            credentials: Secrets of the service principals.
            data: Users that can log in.
            config: Token lifetime and supported scopes.
        """
        self.codes = codes
        self.callers = callers
        self.principals = principals
        self.credentials = credentials
        self.data = data
        self.config = config
        # access token -> subject of redeemed code, used by userinfo
        self._sessions: OrderedDict[str, str] = OrderedDict()
        self._sessions_lock = threading.Lock()

    def authorize(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        client_id: str,
        redirect_uri: str,
        response_type: str,
        scope: str = "",
        state: str = "",
        user_id: Optional[str] = None,
    ) -> Union[UserSelectionPrompt, AuthorizationRedirect]:
        """Handle authorize request.

        Returns:
            UserSelectionPrompt when no user has been selected yet,
            AuthorizationRedirect with the issued code otherwise.

        Raises:
            OAuthProtocolError: If a parameter is missing or invalid, or the
            redirect target is not registered for the client.
        """
        if not client_id or not redirect_uri:
            raise OAuthProtocolError(
                constants.OAUTH_INVALID_REQUEST, "client_id and redirect_uri are required"
            )
        if response_type != constants.RESPONSE_TYPE_CODE:
            raise OAuthProtocolError(
                constants.OAUTH_UNSUPPORTED_RESPONSE_TYPE,
                f"response_type must be '{constants.RESPONSE_TYPE_CODE}'",
            )
        validate_redirect_uri(redirect_uri)

        caller = self.callers.get(client_id)
        if (
            caller is not None
            and caller.redirect_uris
            and redirect_uri not in caller.redirect_uris
        ):
            raise OAuthProtocolError(
                constants.OAUTH_INVALID_REQUEST, "unauthorized redirect_uri"
            )

        if not user_id:
            return UserSelectionPrompt(
                client_id=client_id,
                redirect_uri=redirect_uri,
                response_type=response_type,
                scope=scope,
                state=state,
                users=self.data.users(),
            )

        code = self.codes.issue(
            caller_id=client_id,
            redirect_target=redirect_uri,
            scope=scope,
            subject_id=user_id,
        )
        params = {"code": code.code}
        if state:
            params["state"] = state
        return AuthorizationRedirect(location=append_query(redirect_uri, params))

    def redeem(
        self,
        form: Mapping[str, str],
        issuer: str,
        authorization_header: Optional[str] = None,
    ) -> TokenGrant:
        """Handle token request.

        A request without `grant_type` but with a `code` is treated as the
        authorization-code grant.

        Parameters:
            form: Token request parameters.
            issuer: Issuer placed into the ID token.
            authorization_header: Optional client credentials sent with
            HTTP Basic authentication.

        Raises:
            OAuthProtocolError: On any invalid request.
        """
        grant_type = form.get("grant_type") or ""
        if not grant_type and form.get("code"):
            grant_type = constants.GRANT_TYPE_AUTHORIZATION_CODE

        match grant_type:
            case constants.GRANT_TYPE_AUTHORIZATION_CODE:
                return self._redeem_code(form, issuer)
            case constants.GRANT_TYPE_CLIENT_CREDENTIALS:
                return self._client_credentials(form, authorization_header)
            case "":
                raise OAuthProtocolError(
                    constants.OAUTH_INVALID_REQUEST, "code or grant_type required"
                )
            case _:
                raise OAuthProtocolError(
                    constants.OAUTH_UNSUPPORTED_GRANT_TYPE,
                    f"grant_type '{grant_type}' is not supported",
                )

    def _redeem_code(self, form: Mapping[str, str], issuer: str) -> TokenGrant:
        value = form.get("code") or ""
        if not value:
            raise OAuthProtocolError(
                constants.OAUTH_INVALID_REQUEST, "Authorization code required"
            )

        code = self.codes.pop(value)
        if code is None:
            raise OAuthProtocolError(constants.OAUTH_INVALID_GRANT, "invalid code")

        client_id = form.get("client_id")
        if client_id and client_id != code.caller_id:
            raise OAuthProtocolError(
                constants.OAUTH_INVALID_GRANT, "code was issued to another client"
            )
        redirect_uri = form.get("redirect_uri")
        if redirect_uri and redirect_uri != code.redirect_target:
            raise OAuthProtocolError(
                constants.OAUTH_INVALID_GRANT, "redirect_uri does not match"
            )
        caller = self.callers.get(code.caller_id)
        client_secret = form.get("client_secret")
        if caller is not None and client_secret and not self._caller_secret_matches(
            caller, client_secret
        ):
            raise OAuthProtocolError(
                constants.OAUTH_INVALID_CLIENT,
                "invalid client secret",
                status.HTTP_401_UNAUTHORIZED,
            )

        user = self.data.find_user(code.subject_id)
        claims = identity_claims(
            issuer=issuer,
            audience=code.caller_id,
            subject_id=code.subject_id,
            user=user,
            lifetime=self.config.token_lifetime,
        )
        access_token = constants.MOCK_ACCESS_TOKEN_PREFIX + code.code
        self._remember_session(access_token, code.subject_id)
        logger.info("Authorization code redeemed by %s", code.caller_id)

        return TokenGrant(
            access_token=access_token,
            token_type=constants.TOKEN_TYPE_BEARER,
            expires_in=self.config.token_lifetime,
            refresh_token=constants.MOCK_REFRESH_TOKEN_PREFIX + code.code,
            scope=code.scope,
            id_token=make_unsigned_jwt(claims),
        )

    def _remember_session(self, access_token: str, subject_id: str) -> None:
        with self._sessions_lock:
            self._sessions[access_token] = subject_id
            while len(self._sessions) > constants.MAX_USERINFO_SESSIONS:
                self._sessions.popitem(last=False)

    @staticmethod
    def _caller_secret_matches(caller: RegisteredCaller, client_secret: str) -> bool:
        expected = caller.client_secret.get_secret_value()
        if not expected:
            return True
        return secrets.compare_digest(
            expected.encode("utf-8"), client_secret.encode("utf-8")
        )

    def _client_credentials(
        self, form: Mapping[str, str], authorization_header: Optional[str]
    ) -> TokenGrant:
        client_id = form.get("client_id") or ""
        client_secret = form.get("client_secret") or ""
        if not client_id and authorization_header:
            try:
                scheme, token = split_authorization_header(authorization_header)
                if scheme == "basic":
                    client_id, client_secret = decode_basic_credentials(token)
            except CredentialFormatError as e:
                raise OAuthProtocolError(
                    constants.OAUTH_INVALID_CLIENT,
                    str(e),
                    status.HTTP_401_UNAUTHORIZED,
                ) from e

        if not self.credentials.verify(client_id, client_secret):
            logger.info("Client credentials rejected for '%s'", client_id)
            raise OAuthProtocolError(
                constants.OAUTH_INVALID_CLIENT,
                "invalid client credentials",
                status.HTTP_401_UNAUTHORIZED,
            )
        if self.principals.get_enabled(client_id) is None:
            raise OAuthProtocolError(
                constants.OAUTH_UNAUTHORIZED_CLIENT,
                "service principal is disabled",
                status.HTTP_401_UNAUTHORIZED,
            )

        logger.info("Client credentials token issued for %s", client_id)
        return TokenGrant(
            access_token=constants.MOCK_ACCESS_TOKEN_PREFIX + client_id,
            token_type=constants.TOKEN_TYPE_BEARER,
            expires_in=self.config.token_lifetime,
            scope=form.get("scope") or "",
        )

    def subject_of(self, access_token: str) -> Optional[User]:
        """Return user the access token was issued for, if known."""
        with self._sessions_lock:
            subject_id = self._sessions.get(access_token)
        if subject_id is None:
            return None
        return self.data.find_user(subject_id)

    def userinfo(self, authorization_header: Optional[str]) -> dict[str, Any]:
        """Return profile of the user behind a bearer token.

        Tokens issued by code redemption resolve to their subject. Any other
        token containing `admin` yields the built-in administrator, every
        remaining token the first configured user.

        Raises:
            OAuthProtocolError: If the bearer token is missing or no user
            profile is available.
        """
        if not authorization_header:
            raise OAuthProtocolError(
                "invalid_token",
                "Authorization header required",
                status.HTTP_401_UNAUTHORIZED,
            )
        try:
            scheme, token = split_authorization_header(authorization_header)
        except CredentialFormatError as e:
            raise OAuthProtocolError(
                "invalid_token", str(e), status.HTTP_401_UNAUTHORIZED
            ) from e
        if scheme != "bearer":
            raise OAuthProtocolError(
                "invalid_token",
                "Invalid authorization header format",
                status.HTTP_401_UNAUTHORIZED,
            )

        user = self.subject_of(token)
        if user is None and "admin" in token:
            return dict(ADMIN_PROFILE)
        if user is None and self.data.users():
            user = self.data.users()[0]
        if user is None:
            raise OAuthProtocolError(
                "invalid_token", "no user profile available", status.HTTP_401_UNAUTHORIZED
            )

        given_name, family_name = split_display_name(user.display_name)
        return {
            "sub": user.id,
            "name": user.display_name,
            "email": user.mail or user.user_principal_name,
            "given_name": given_name,
            "family_name": family_name,
            "job_title": user.job_title,
            "department": user.department,
            "office_location": user.office_location,
            "roles": list(user.roles),
            "account_enabled": user.account_enabled,
            "user_principal_name": user.user_principal_name,
        }

    def register_caller(self, caller: RegisteredCaller) -> RegisteredCaller:
        """Register OAuth2 client."""
        return self.callers.register(caller)

    def list_callers(self) -> list[RegisteredCaller]:
        """Return all registered OAuth2 clients."""
        return self.callers.all()
