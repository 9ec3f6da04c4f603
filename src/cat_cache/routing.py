"""Request classification.

Maps an inbound (method, path) to the resolver operation and cache key, or
to a rejection, before anything touches storage.
"""

from cat_cache.entities import Operation, Rejection, Route

KEY_REQUIRED_MESSAGE = "HTTP code is required in path, e.g. /200"
METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed"

METHOD_OPERATIONS = {
    "GET": Operation.FETCH,
    "PUT": Operation.STORE,
    "DELETE": Operation.REMOVE,
}


class RequestRouter:
    """Pure classifier for proxy requests."""

    def __init__(self, method_operations: dict[str, Operation] | None = None) -> None:
        self._operations = method_operations or METHOD_OPERATIONS

    @staticmethod
    def extract_key(path: str) -> str:
        """Return the path with its leading separator removed."""
        return path[1:] if path.startswith("/") else path

    def classify(self, method: str, path: str) -> Route:
        """Classify a request.

        The key is checked before the method, so ``PATCH /`` is a bad
        request rather than a method error.

        Args:
            method: HTTP method
            path: Request path without query string

        Returns:
            An accepted Route with operation and key, or a rejected one
        """
        key = self.extract_key(path)
        if not key:
            return Route.reject(Rejection.BAD_REQUEST, KEY_REQUIRED_MESSAGE)

        operation = self._operations.get(method.upper())
        if operation is None:
            return Route.reject(Rejection.METHOD_NOT_ALLOWED, METHOD_NOT_ALLOWED_MESSAGE)

        return Route.accept(operation, key)
