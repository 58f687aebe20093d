# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Change subscriptions for filesystem backends.

``PollingSubscription`` runs a daemon thread that recomputes a signature for a
path every ``interval`` seconds and invokes the callback whenever it differs
from the previous one. ``CallbackSubscription`` is the synchronous variant used
by backends that know exactly when they mutate (e.g. the in-memory tree).

Example::

    sub = PollingSubscription(
        path="/tmp/notes.txt",
        callback=lambda: print("changed"),
        signature=lambda: path_signature(pathlib.Path("/tmp/notes.txt")),
        interval=0.5,
    )
    sub.start()
    ...
    sub.cancel()
"""

from __future__ import annotations

import os
import pathlib
import threading
from collections.abc import Callable, Hashable

from ..logging import StructuredLogger, get_logger
from ._types import ChangeCallback

logger: StructuredLogger = get_logger(__name__, context={"component": "watch"})

Signature = Hashable


def path_signature(path: pathlib.Path) -> Signature:
    """Return a cheap stat tuple describing ``path``.

    Directories also contribute their sorted child names so that additions and
    removals are observed even when the directory mtime is coarse.
    """
    try:
        st = path.lstat()
    except FileNotFoundError:
        return ("missing",)
    except OSError:
        return ("error",)
    names: tuple[str, ...] = ()
    if path.is_dir():
        try:
            names = tuple(sorted(os.listdir(path)))
        except OSError:
            names = ()
    return ("ok", st.st_mtime_ns, st.st_size, st.st_mode, names)


class PollingSubscription:
    """Poll ``signature`` on a daemon thread and report changes."""

    def __init__(
        self,
        *,
        path: str,
        callback: ChangeCallback,
        signature: Callable[[], Signature],
        interval: float = 0.5,
    ) -> None:
        self._path = path
        self._callback = callback
        self._signature = signature
        self._interval = interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._last: Signature | None = None
        self._has_baseline = False

    @property
    def active(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    @property
    def interval(self) -> float:
        return self._interval

    def start(self) -> None:
        """Start the polling thread."""
        if self._thread is not None:
            return
        self._take_baseline()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name=f"plfile-watch:{self._path}",
            daemon=True,
        )
        self._thread.start()
        logger.debug(
            "Started polling subscription.",
            event="watch_started",
            context={"path": self._path, "interval": self._interval},
        )

    def cancel(self) -> None:
        """Stop the polling thread."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._interval * 2)

    def poll(self) -> bool:
        """Compare the current signature with the last one; True on change.

        On a subscription that was never started the first call only records
        the baseline.
        """
        if not self._has_baseline:
            self._take_baseline()
            return False
        current = self._signature()
        if current == self._last:
            return False
        self._last = current
        try:
            self._callback()
        except Exception:
            logger.exception(
                "Change callback failed.",
                event="watch_callback_failed",
                context={"path": self._path},
            )
        return True

    def _take_baseline(self) -> None:
        self._last = self._signature()
        self._has_baseline = True

    def _run(self) -> None:
        while not self._stop_event.wait(timeout=self._interval):
            _ = self.poll()


class CallbackSubscription:
    """Subscription notified directly by the backend that owns it."""

    def __init__(
        self,
        *,
        path: str,
        callback: ChangeCallback,
        on_cancel: Callable[[CallbackSubscription], None],
    ) -> None:
        self.path = path
        self._callback = callback
        self._on_cancel = on_cancel
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._on_cancel(self)

    def notify(self) -> None:
        if not self._active:
            return
        try:
            self._callback()
        except Exception:
            logger.exception(
                "Change callback failed.",
                event="watch_callback_failed",
                context={"path": self.path},
            )


__all__ = [
    "CallbackSubscription",
    "PollingSubscription",
    "Signature",
    "path_signature",
]
