"""Per-program handler objects, kept in a registry per handler class."""

from __future__ import annotations

from typing import Any, ClassVar, TypeVar

_H = TypeVar("_H", bound="AmxHandler")


class AmxHandler:
    """Base class for objects attached to one abstract machine instance.

    Each subclass has its own registry; programs are matched by identity.
    """

    _handlers: ClassVar[dict[int, "AmxHandler"]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._handlers = {}

    def __init__(self, amx: Any) -> None:
        self._amx = amx

    @property
    def amx(self) -> Any:
        """The program this handler belongs to."""
        return self._amx

    @classmethod
    def create_handler(cls: type[_H], amx: Any) -> _H:
        """Create a handler for ``amx``; an already registered one stays registered."""
        handler = cls(amx)
        cls._handlers.setdefault(id(amx), handler)
        return handler

    @classmethod
    def get_handler(cls: type[_H], amx: Any) -> _H | None:
        """Return the registered handler for ``amx``, or None."""
        handler = cls._handlers.get(id(amx))
        if handler is not None and handler.amx is amx:
            return handler
        return None

    @classmethod
    def destroy_handler(cls, amx: Any) -> None:
        """Forget the handler registered for ``amx``, if any."""
        handler = cls._handlers.get(id(amx))
        if handler is not None and handler.amx is amx:
            del cls._handlers[id(amx)]