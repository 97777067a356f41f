"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Coroutine

from kungfu import Ok

from oneshot import Callback
from oneshot.api import Credential, Record, RecordList


# Fake completion-style API — answers from a timer thread, like a network client
class SlowAccounts:
    def __init__(self, delay: float = 0.2) -> None:
        self.delay = delay

    def login(self, callback: Callback[Credential]) -> None:
        threading.Timer(self.delay, callback, [Ok(Credential("QpwL5tke4Pnpja7X4"))]).start()

    def fetch_users(self, credential: Credential, callback: Callback[RecordList]) -> None:
        users = (
            Record(1, "george.bluth@reqres.in", "George", "Bluth", "https://reqres.in/img/faces/1-image.jpg"),
            Record(2, "janet.weaver@reqres.in", "Janet", "Weaver", "https://reqres.in/img/faces/2-image.jpg"),
        )
        threading.Timer(self.delay, callback, [Ok(users)]).start()


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
