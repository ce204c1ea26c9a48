"""Process-wide state of the mock service."""

from dataclasses import dataclass

from fastapi import Request

from authentication import get_authenticator
from authorization.gate import AuthorizationGate
from configuration import AppConfig
from identity.oauth2 import OAuth2StateMachine
from log import get_logger
from mappers import FAMILY_HANDLERS
from models.config import Configuration
from routes.compiler import RouteCompiler
from routes.dispatcher import Dispatcher
from specs.loader import SpecLoader
from store.callers import CallerRegistry
from store.codes import AuthorizationCodeTable
from store.data_store import DataStore
from store.principals import build_principal_tables

logger = get_logger(__name__)


@dataclass
class MockContext:
    """Component graph shared by all request handlers.

    Built once at startup and stored on `app.state.context`. The data
    store, principal and credential tables are read-only after
    construction; the authorization code table and the caller registry
    guard their own mutations.
    """

    configuration: Configuration
    data: DataStore
    dispatcher: Dispatcher
    gate: AuthorizationGate
    identity: OAuth2StateMachine

    @classmethod
    def from_configuration(cls, configuration: Configuration) -> "MockContext":
        """Build the whole component graph from validated configuration.

        Parameters:
            configuration: Loaded service configuration.

        Returns:
            MockContext: Context with compiled routes registered.
        """
        principals, credentials = build_principal_tables(
            configuration.service_accounts
        )
        data = DataStore(
            resource_groups=configuration.resource_groups,
            vms=configuration.vms,
            users=configuration.users,
            principals=principals,
        )
        gate = AuthorizationGate(
            get_authenticator(principals, credentials),
            configuration.authorization,
        )
        identity = OAuth2StateMachine(
            codes=AuthorizationCodeTable(),
            callers=CallerRegistry(configuration.apps),
            principals=principals,
            credentials=credentials,
            data=data,
            config=configuration.identity,
        )

        dispatcher = Dispatcher()
        if configuration.specs.enabled:
            documents = SpecLoader(configuration.specs.directory).load_all()
            dispatcher.register(RouteCompiler(FAMILY_HANDLERS).compile(documents))
        else:
            logger.info("Spec-driven routes are disabled")
            dispatcher.register([])

        logger.warning(
            "Mock credentials in use: bearer tokens are guessable and ID tokens "
            "are unsigned, never expose this service outside a development setup"
        )
        logger.info(
            "Mock context ready: %d route(s), %d service principal(s), "
            "%d app registration(s)",
            dispatcher.route_count,
            len(principals),
            len(identity.list_callers()),
        )
        return cls(
            configuration=configuration,
            data=data,
            dispatcher=dispatcher,
            gate=gate,
            identity=identity,
        )

    @classmethod
    def from_file(cls, filename: str) -> "MockContext":
        """Load configuration file and build the context from it."""
        app_config = AppConfig()
        app_config.load_configuration(filename)
        return cls.from_configuration(app_config.configuration)


def get_context(request: Request) -> MockContext:
    """Return the mock context of the application serving the request."""
    return request.app.state.context
