"""
Client data layer for the todo API.

TodoApi wraps the HTTP endpoints in an httpx client. TodoClient adds a
small query cache on top: the task list is cached under TODOS_KEY and
every successful mutation invalidates it, so the next fetch goes back
to the server.

Usage:
    with TodoClient.connect("http://localhost:8000/api") as client:
        state = client.fetch_all()
        create = client.create_mutation()
        create.run("Buy milk")
        client.fetch_all()   # re-fetched, the list was invalidated
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

import httpx

logger = logging.getLogger(__name__)


# =============================================================================
# Errors
# =============================================================================

class ClientError(Exception):
    """Base class for everything the client data layer raises."""


class TransportError(ClientError):
    """The API could not be reached."""


class ApiError(ClientError):
    """The API answered with a non-success status."""

    def __init__(self, status_code: int, detail: Any = None):
        super().__init__(f"API responded {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    pass


# =============================================================================
# Records and cache keys
# =============================================================================

@dataclass(frozen=True)
class TodoItem:
    """Client-side view of a Todo record."""
    id: UUID
    task: str
    status: bool

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "TodoItem":
        return cls(id=UUID(str(data['id'])), task=data['task'], status=bool(data['status']))


@dataclass(frozen=True)
class QueryKey:
    """
    Typed cache key. A key matches every key that shares its scope and
    starts with its params, so invalidating QueryKey("todos") also
    invalidates QueryKey("todos", ("done",)).
    """
    scope: str
    params: Tuple[str, ...] = ()

    def matches(self, other: "QueryKey") -> bool:
        return (
            other.scope == self.scope
            and other.params[:len(self.params)] == self.params
        )


TODOS_KEY = QueryKey("todos")


class QueryStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class MutationStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


# =============================================================================
# Query cache
# =============================================================================

@dataclass
class QueryState:
    status: QueryStatus = QueryStatus.IDLE
    data: Any = None
    error: Optional[Exception] = None
    is_stale: bool = True

    @property
    def is_loading(self) -> bool:
        return self.status == QueryStatus.LOADING

    @property
    def is_error(self) -> bool:
        return self.status == QueryStatus.ERROR

    @property
    def is_success(self) -> bool:
        return self.status == QueryStatus.SUCCESS


class QueryCache:
    """Holds one QueryState per key."""

    def __init__(self):
        self._entries: Dict[QueryKey, QueryState] = {}

    def get(self, key: QueryKey) -> QueryState:
        if key not in self._entries:
            self._entries[key] = QueryState()
        return self._entries[key]

    def set_loading(self, key: QueryKey) -> QueryState:
        state = self.get(key)
        state.status = QueryStatus.LOADING
        state.error = None
        return state

    def set_data(self, key: QueryKey, data: Any) -> QueryState:
        state = self.get(key)
        state.status = QueryStatus.SUCCESS
        state.data = data
        state.error = None
        state.is_stale = False
        return state

    def set_error(self, key: QueryKey, error: Exception) -> QueryState:
        # Previous data stays in place
        state = self.get(key)
        state.status = QueryStatus.ERROR
        state.error = error
        return state

    def invalidate(self, key: QueryKey) -> int:
        """Mark every entry matching key as stale. Returns how many were marked."""
        marked = 0
        for entry_key, state in self._entries.items():
            if key.matches(entry_key):
                state.is_stale = True
                marked += 1
        logger.debug(f"Invalidated {marked} cache entries for {key}")
        return marked


class Query:
    """Binds a cache key to the function that fetches its data."""

    def __init__(self, cache: QueryCache, key: QueryKey, fetcher: Callable[[], Any]):
        self.cache = cache
        self.key = key
        self._fetcher = fetcher

    @property
    def state(self) -> QueryState:
        return self.cache.get(self.key)

    def fetch(self, force: bool = False) -> QueryState:
        """
        Load data into the cache. A fresh entry is returned as is
        unless force is set.
        """
        state = self.state
        if not force and state.is_success and not state.is_stale:
            return state

        self.cache.set_loading(self.key)
        try:
            data = self._fetcher()
        except ClientError as e:
            logger.error(f"Query {self.key} failed: {e}")
            return self.cache.set_error(self.key, e)
        except Exception as e:
            self.cache.set_error(self.key, e)
            raise
        return self.cache.set_data(self.key, data)


class Mutation:
    """
    One write operation with its own pending flag.

    On success the listed keys are invalidated and on_success receives the
    result. On failure the error is logged and kept on the mutation; the
    cache is left alone. A pending mutation refuses another run().
    """

    def __init__(
        self,
        name: str,
        fn: Callable[..., Any],
        cache: QueryCache,
        invalidates: Sequence[QueryKey] = (),
        on_success: Optional[Callable[[Any], None]] = None,
    ):
        self.name = name
        self._fn = fn
        self.cache = cache
        self.invalidates = tuple(invalidates)
        self.on_success = on_success
        self.status = MutationStatus.IDLE
        self.error: Optional[Exception] = None
        self.result: Any = None

    @property
    def is_pending(self) -> bool:
        return self.status == MutationStatus.PENDING

    @property
    def is_success(self) -> bool:
        return self.status == MutationStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status == MutationStatus.ERROR

    def run(self, *args, **kwargs) -> Any:
        if self.is_pending:
            logger.warning(f"Mutation {self.name} already in flight, ignoring")
            return None

        self.status = MutationStatus.PENDING
        self.error = None
        try:
            result = self._fn(*args, **kwargs)
        except ClientError as e:
            logger.error(f"Mutation {self.name} failed: {e}")
            self.status = MutationStatus.ERROR
            self.error = e
            return None
        except Exception:
            self.status = MutationStatus.ERROR
            raise

        self.status = MutationStatus.SUCCESS
        self.result = result
        for key in self.invalidates:
            self.cache.invalidate(key)
        if self.on_success:
            self.on_success(result)
        return result


# =============================================================================
# HTTP
# =============================================================================

class TodoApi:
    """Thin typed wrapper over the /todos endpoints."""

    def __init__(self, http: httpx.Client):
        self.http = http

    def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        try:
            response = self.http.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                raise ApiError(response.status_code, f"response is not JSON: {e}") from e

        try:
            detail = response.json().get('detail')
        except ValueError:
            detail = response.text

        if response.status_code == 404:
            raise NotFoundError(404, detail)
        if response.status_code == 422:
            raise ValidationError(422, detail)
        raise ApiError(response.status_code, detail)

    @staticmethod
    def _todo(data: Any) -> TodoItem:
        try:
            return TodoItem.from_json(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ApiError(200, f"malformed todo record: {data!r}") from e

    def list_todos(self) -> List[TodoItem]:
        data = self._request("GET", "todos")
        if not isinstance(data, list):
            raise ApiError(200, f"expected a list of todos, got {type(data).__name__}")
        return [self._todo(item) for item in data]

    def create_todo(self, task: str) -> TodoItem:
        return self._todo(self._request("POST", "todos", json={"task": task}))

    def update_status(self, todo_id: UUID, status: bool) -> None:
        self._request("PUT", f"todos/{todo_id}", json={"status": status})

    def delete_todo(self, todo_id: UUID) -> None:
        self._request("DELETE", f"todos/{todo_id}")


class TodoClient:
    """
    The API plus a query cache. Each UI control should take its own
    mutation from the factories so pending flags stay per control.
    """

    def __init__(self, http: httpx.Client, cache: Optional[QueryCache] = None):
        self.http = http
        self.api = TodoApi(http)
        self.cache = cache or QueryCache()
        self.todos_query = Query(self.cache, TODOS_KEY, self.api.list_todos)

    @classmethod
    def connect(cls, base_url: str, transport: Optional[httpx.BaseTransport] = None) -> "TodoClient":
        # Trailing slash so relative paths resolve under the API prefix
        base_url = base_url.rstrip('/') + '/'
        return cls(httpx.Client(base_url=base_url, transport=transport))

    def close(self):
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def fetch_all(self, force: bool = False) -> QueryState:
        return self.todos_query.fetch(force=force)

    def create_mutation(self, on_success: Optional[Callable[[TodoItem], None]] = None) -> Mutation:
        return Mutation("create", self.api.create_todo, self.cache, [TODOS_KEY], on_success)

    def status_mutation(self, on_success: Optional[Callable[[None], None]] = None) -> Mutation:
        return Mutation("set_status", self.api.update_status, self.cache, [TODOS_KEY], on_success)

    def delete_mutation(self, on_success: Optional[Callable[[None], None]] = None) -> Mutation:
        return Mutation("delete", self.api.delete_todo, self.cache, [TODOS_KEY], on_success)
