r"""JSON (de)serialization of request and response bodies."""

from __future__ import annotations

__all__ = ["JsonSerializer", "Serializer"]

import dataclasses
import json
from typing import Any, Protocol, TypeVar, get_origin, runtime_checkable

from pushpipe.exceptions import SerializationError

T = TypeVar("T")


@runtime_checkable
class Serializer(Protocol):
    """Turns objects into text bodies and text bodies into objects."""

    def serialize(self, obj: Any) -> str:
        """Serialize ``obj`` to text."""

    def deserialize(self, text: str, result_type: type[T] | None = None) -> T:
        """Deserialize ``text`` into an instance of ``result_type``.

        Raises:
            SerializationError: If ``text`` cannot be deserialized.
        """


class JsonSerializer:
    """JSON serializer supporting plain JSON values and dataclasses.

    ``deserialize`` returns the parsed JSON value when ``result_type`` is
    ``None`` or ``Any``. For a dataclass, the parsed object is passed as
    keyword arguments. For any other type the parsed value must already
    be an instance of it. Parameterized generics such as ``list[str]``
    are checked against their origin type; their items are not checked.

    Example:
        ```pycon
        >>> from dataclasses import dataclass
        >>> from pushpipe.serializer import JsonSerializer
        >>> @dataclass
        ... class Reply:
        ...     ok: bool
        ...
        >>> serializer = JsonSerializer()
        >>> serializer.deserialize('{"ok": true}', Reply)
        Reply(ok=True)
        >>> serializer.deserialize('{"ok": true}', dict)
        {'ok': True}
        >>> serializer.serialize(Reply(ok=False))
        '{"ok": false}'

        ```
    """

    def serialize(self, obj: Any) -> str:
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            obj = dataclasses.asdict(obj)
        try:
            return json.dumps(obj)
        except (TypeError, ValueError) as exc:
            msg = f"unable to serialize {type(obj).__name__}: {exc}"
            raise SerializationError(msg) from exc

    def deserialize(self, text: str, result_type: type[T] | None = None) -> T:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"response body is not valid JSON: {exc}"
            raise SerializationError(msg) from exc

        if result_type is None or result_type is Any:
            return data
        if dataclasses.is_dataclass(result_type):
            if not isinstance(data, dict):
                msg = f"expected a JSON object for {result_type.__name__}, got {type(data).__name__}"
                raise SerializationError(msg)
            try:
                return result_type(**data)
            except TypeError as exc:
                msg = f"unable to build {result_type.__name__} from response: {exc}"
                raise SerializationError(msg) from exc
        expected_type = get_origin(result_type) or result_type
        if isinstance(data, expected_type):
            return data
        msg = f"expected {expected_type.__name__}, got {type(data).__name__}"
        raise SerializationError(msg)
