"""
TypeReflect Value Probe

Best-effort reads of field and property values and invocations of
zero-argument methods, performed only so their results can be shown next
to a declaration.

A probe never raises. Any exception from the underlying read or call,
including SystemExit, turns into the ABSENT sentinel, which callers treat
exactly as if the value had never been requested: no error token and no partial clause is rendered.
Each probe performs at most one read or call; results are neither retried
nor cached.

KeyboardInterrupt is the one exception let through, so Ctrl-C still stops
a run.
"""

import logging
from typing import Any, Union

from typereflect.schema import FieldDescriptor, MethodDescriptor, PropertyDescriptor

logger = logging.getLogger(__name__)


class Absent:
    """Marker for "no value": the probe was skipped or failed."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = Absent()


def try_read(
    member: Union[FieldDescriptor, PropertyDescriptor],
    instance: Any = None,
) -> Any:
    """
    Read a field or property value.

    Args:
        member: The field or property to read
        instance: The live instance, or None for a static context

    Returns:
        The value read, or ABSENT if the member has no getter or the read failed
    """
    getter = getattr(member, "getter", None)
    if getter is None:
        return ABSENT
    try:
        return getter(instance)
    except KeyboardInterrupt:
        raise
    except BaseException:
        logger.debug("Reading %s failed; rendering without a value", member.name, exc_info=True)
        return ABSENT


def try_invoke(method: MethodDescriptor, instance: Any = None) -> Any:
    """
    Invoke a zero-argument method once.

    Methods that take parameters are never invoked.

    Args:
        method: The method to call
        instance: The live instance, or None for a static context

    Returns:
        The call's result, or ABSENT if it was not called or raised
    """
    if method.invoker is None or not method.takes_no_arguments:
        return ABSENT
    try:
        return method.invoker(instance)
    except KeyboardInterrupt:
        raise
    except BaseException:
        logger.debug("Invoking %s failed; rendering without a result", method.name, exc_info=True)
        return ABSENT


def try_getattr(target: Any, name: str) -> Any:
    """Read an attribute, returning ABSENT instead of raising."""
    try:
        return getattr(target, name)
    except KeyboardInterrupt:
        raise
    except BaseException:
        logger.debug("Reading attribute %s failed", name, exc_info=True)
        return ABSENT
