"""GraphQL transport for the AppSync backend."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from golf_scheduler.domain.errors import BackendRequestError
from golf_scheduler.services.transient_errors import NO_RESPONSE_STATUS


class GraphQLClient(Protocol):
    """Interface for executing GraphQL documents."""

    async def request(
        self, document: str, variables: dict[str, object] | None = None
    ) -> dict[str, object]:
        """Execute a query or mutation and return its ``data`` object."""


@dataclass
class HttpxGraphQLClient(GraphQLClient):
    """GraphQL client implemented with httpx and an AppSync API key."""

    endpoint: str
    api_key: str
    http_client: httpx.AsyncClient
    timeout: float = 15

    @classmethod
    def create(
        cls, endpoint: str, api_key: str, timeout: float = 15
    ) -> "HttpxGraphQLClient":
        """Create a GraphQL client with a managed httpx session."""
        return cls(
            endpoint=endpoint,
            api_key=api_key,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def request(
        self, document: str, variables: dict[str, object] | None = None
    ) -> dict[str, object]:
        """POST a GraphQL document to the endpoint."""
        try:
            response = await self.http_client.post(
                self.endpoint,
                json={"query": document, "variables": variables or {}},
                headers={"x-api-key": self.api_key},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            raise BackendRequestError(
                f"Request timed out: {exc}", http_status=NO_RESPONSE_STATUS
            ) from exc
        except httpx.TransportError as exc:
            raise BackendRequestError(
                f"Network request failed: {exc}", http_status=NO_RESPONSE_STATUS
            ) from exc
        if response.is_error:
            raise BackendRequestError(
                f"Backend returned HTTP {response.status_code}",
                http_status=response.status_code,
            )
        body = response.json()
        errors = body.get("errors")
        if errors:
            raise BackendRequestError(_join_errors(errors))
        return body.get("data") or {}

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()


def _join_errors(errors: list[object]) -> str:
    messages = []
    for error in errors:
        if isinstance(error, dict):
            messages.append(str(error.get("message", "Unknown GraphQL error")))
        else:
            messages.append(str(error))
    return "; ".join(messages)
