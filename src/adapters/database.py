"""
Database Execution Adapter

The concrete database driver is an external collaborator: the gateway talks
to it through the DatabaseClient interface and only translates its outcome
into AdapterResult values.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from src.adapters.results import AdapterFailure, AdapterResult, AdapterSuccess
from src.core.exceptions import ErrorCode

logger = logging.getLogger(__name__)


class DatabaseClient(ABC):
    """Interface for the driver that runs statements against a database."""

    @abstractmethod
    async def fetch(
        self,
        connection_string: str,
        statement: str,
        parameters: dict[str, Any],
    ) -> Any:
        """
        Run a statement and return its rows.

        Args:
            connection_string: Connection string from the API descriptor.
            statement: Statement to execute.
            parameters: Bound statement parameters.

        Returns:
            JSON-serializable rows or result object.
        """


class DatabaseAdapter:
    """Runs database tool calls through an injected DatabaseClient."""

    def __init__(self, client: Optional[DatabaseClient] = None) -> None:
        self._client = client

    @property
    def configured(self) -> bool:
        """Whether a database client is available."""
        return self._client is not None

    async def execute(
        self,
        connection_string: str,
        statement: str,
        parameters: dict[str, Any],
    ) -> AdapterResult:
        """
        Execute a statement.

        Args:
            connection_string: Connection string from the API descriptor.
            statement: Statement to execute.
            parameters: Bound statement parameters.

        Returns:
            AdapterSuccess with the rows, or AdapterFailure.
        """
        if self._client is None:
            return AdapterFailure(
                error=ErrorCode.UPSTREAM_ERROR,
                message="No database client configured",
                code="DATABASE_UNAVAILABLE",
            )
        try:
            rows = await self._client.fetch(connection_string, statement, parameters)
        except Exception as e:
            logger.warning(f"Database statement failed: {type(e).__name__}: {e}")
            return AdapterFailure(
                error=ErrorCode.UPSTREAM_ERROR,
                message=f"Database error: {e}",
                code="DATABASE_ERROR",
            )
        return AdapterSuccess(data=rows)
