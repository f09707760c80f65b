"""
Channel to a background execution context.

A WorkerChannel carries one request and its response per call. The
ExecutorChannel runs the request handler on a concurrent.futures executor;
creating and shutting down that executor is up to the caller.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from concurrent.futures import Executor
from typing import Any, Callable

from .node import Bip32Node, NodeDescriptor
from .types import DERIVE_ADDRESS_RANGE, UnknownRequestError, validate_range

logger = logging.getLogger(__name__)

Request = dict[str, Any]
Response = dict[str, Any]


class WorkerChannel(ABC):
    """Abstract base class for request/response messaging with a worker."""

    @abstractmethod
    async def post_message(self, request: Request) -> Response:
        """Send a request and wait for its response."""
        pass


def handle_request(request: Request) -> Response:
    """
    Handle a request inside the background execution context.

    Args:
        request: Request with a "type" field; deriveAddressRange requests also
            carry "node", "version", "firstIndex" and "lastIndex"

    Returns:
        Response with an "addresses" field

    Raises:
        UnknownRequestError: If the request type is not supported
    """
    request_type = request.get("type")
    if request_type != DERIVE_ADDRESS_RANGE:
        raise UnknownRequestError(request_type)

    first_index = request["firstIndex"]
    last_index = request["lastIndex"]
    validate_range(first_index, last_index)

    descriptor = NodeDescriptor.from_dict(request["node"])
    node = Bip32Node.from_descriptor(descriptor, request["version"])

    addresses = [node.derive(i).get_address() for i in range(first_index, last_index + 1)]
    return {"addresses": addresses}


class ExecutorChannel(WorkerChannel):
    """Runs a request handler on an executor (thread or process pool)."""

    def __init__(
        self,
        executor: Executor,
        handler: Callable[[Request], Response] = handle_request,
    ) -> None:
        """
        Creates a channel backed by an executor.

        Args:
            executor: Executor owned by the caller. With a process pool the
                handler and requests must be picklable.
            handler: Function run for each request (default: handle_request)
        """
        self._executor = executor
        self._handler = handler

    async def post_message(self, request: Request) -> Response:
        loop = asyncio.get_running_loop()
        logger.debug("Posting %s request to executor", request.get("type"))
        return await loop.run_in_executor(self._executor, self._handler, request)
