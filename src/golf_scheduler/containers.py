"""Dependency container wiring for the client core."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from golf_scheduler.adapters.appsync_api import AppSyncSessionApi
from golf_scheduler.adapters.graphql_client import HttpxGraphQLClient
from golf_scheduler.app_logging import configure_logging
from golf_scheduler.config import Settings, parse_error_signatures
from golf_scheduler.services.dispatcher import MutationDispatcher
from golf_scheduler.services.overlay import OptimisticOverlay
from golf_scheduler.services.responses import ResponseGateway
from golf_scheduler.services.retry import ResilientRequestExecutor, RetryPolicy
from golf_scheduler.services.sessions import SessionService
from golf_scheduler.services.submissions import SubmissionTracker
from golf_scheduler.services.transient_errors import TransientErrorClassifier
from golf_scheduler.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    graphql_client: HttpxGraphQLClient
    session_api: AppSyncSessionApi
    executor: ResilientRequestExecutor
    response_gateway: ResponseGateway
    session_service: SessionService
    user_service: UserService
    close_resources: Callable[[], Awaitable[None]]

    def dispatcher_for(self, session_id: str) -> MutationDispatcher:
        """Create the edit dispatcher for one session's response card."""
        overlay = OptimisticOverlay(self.session_service.repository_for(session_id))
        return MutationDispatcher(
            session_id=session_id,
            gateway=self.response_gateway,
            overlay=overlay,
            tracker=SubmissionTracker(),
            settle_delay_seconds=self.settings.transport_settle_delay_ms / 1000,
        )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    graphql_client = HttpxGraphQLClient.create(
        endpoint=resolved_settings.appsync_endpoint,
        api_key=resolved_settings.appsync_api_key,
        timeout=resolved_settings.request_timeout_seconds,
    )
    session_api = AppSyncSessionApi(graphql_client)
    executor = ResilientRequestExecutor(
        policy=RetryPolicy(
            max_retries=resolved_settings.retry_max_retries,
            base_delay_ms=resolved_settings.retry_base_delay_ms,
            max_delay_ms=resolved_settings.retry_max_delay_ms,
            backoff_multiplier=resolved_settings.retry_backoff_multiplier,
        ),
        classifier=TransientErrorClassifier.from_signatures(
            parse_error_signatures(resolved_settings.transient_error_signatures)
        ),
    )
    response_gateway = ResponseGateway(api=session_api, executor=executor)
    session_service = SessionService(api=session_api, executor=executor)
    user_service = UserService(api=session_api, executor=executor)

    async def close_resources() -> None:
        await graphql_client.close()

    return AppContainer(
        settings=resolved_settings,
        graphql_client=graphql_client,
        session_api=session_api,
        executor=executor,
        response_gateway=response_gateway,
        session_service=session_service,
        user_service=user_service,
        close_resources=close_resources,
    )
