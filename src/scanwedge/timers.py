# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import datetime
import typing

import trio

from .types import NotRunningError


class RearmableTimer:
    """A one-shot delayed callback that restarts from zero every time it is armed.

    The callback runs as a child task of the nursery given to attach(); it must not block.
    """

    _nursery: typing.Optional[trio.Nursery]
    _scope: typing.Optional[trio.CancelScope]

    def __init__(self, callback: collections.abc.Callable[[], None]):
        self.callback = callback
        self._nursery = None
        self._scope = None

    def attach(self, nursery: typing.Optional[trio.Nursery]):
        self.cancel()
        self._nursery = nursery

    @property
    def pending(self):
        return self._scope is not None

    def rearm(self, delay: datetime.timedelta):
        if self._nursery is None:
            raise NotRunningError()
        self.cancel()
        scope = trio.CancelScope()
        self._scope = scope
        self._nursery.start_soon(self._fire, scope, max(delay.total_seconds(), 0))

    def cancel(self):
        if self._scope is not None:
            self._scope.cancel()
            self._scope = None

    async def _fire(self, scope: trio.CancelScope, seconds: float):
        with scope:
            await trio.sleep(seconds)
            if self._scope is scope:
                self._scope = None
            self.callback()
