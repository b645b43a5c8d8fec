#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from functools import partial, update_wrapper
from typing import TYPE_CHECKING

from ._markers import MISSING

if TYPE_CHECKING:
    from typing import Any, TypeVar

    from ._markers import MissingType

    if sys.version_info >= (3, 9):
        from collections.abc import Callable, MutableMapping
    else:
        from typing import Callable, MutableMapping

    _CallableT = TypeVar("_CallableT", bound=Callable[..., Any])

if sys.version_info >= (3, 11):
    from typing import overload
else:
    from typing_extensions import overload


@overload
def replaces(
    namespace: MutableMapping[str, object],
    replacer: MissingType = MISSING,
    /,
) -> Callable[[_CallableT], _CallableT]: ...
@overload
def replaces(
    namespace: MutableMapping[str, object],
    replacer: _CallableT,
    /,
) -> _CallableT: ...
def replaces(namespace, replacer=MISSING, /):
    """
    Wrap and replace the function of the same name in *namespace*.

    Used for global rebinding: a function that has to resolve something
    lazily (an import, a detected library) does so on the first call and then
    installs a faster version of itself.

    Raises:
      LookupError:
        if there is no function of the same name in *namespace*.

    Example:
      >>> def backend():
      ...     @replaces(globals())
      ...     def backend():
      ...         return 'cached'
      ...     return 'detected'
      >>> backend()
      'detected'
      >>> backend()
      'cached'
    """

    if replacer is MISSING:
        return partial(replaces, namespace)

    name = replacer.__name__

    try:
        wrapped = namespace[name]
    except KeyError:
        if "__spec__" in namespace:  # a module namespace
            namespace_repr = f"module {namespace['__name__']!r}"
        else:
            namespace_repr = "`namespace`"

        msg = f"{namespace_repr} has no function {name!r}"
        raise LookupError(msg) from None
    else:
        update_wrapper(replacer, wrapped)

    # break the reference chain between generations of the same function
    try:
        del replacer.__wrapped__
    except AttributeError:
        pass

    namespace[name] = replacer

    return replacer
