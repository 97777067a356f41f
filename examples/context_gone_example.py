"""
Bridge — what happens when the screen goes away mid-request.

The first await completes normally. For the second, the scope is closed
while login is still in flight; the await still returns, with CONTEXT_GONE.
"""

import asyncio

from kungfu import Ok, Error
from oneshot import bridge as B
from oneshot import Scope
from examples._infra import SlowAccounts, banner, run


async def main() -> None:
    accounts = SlowAccounts(delay=0.2)

    banner("Bridge: scope alive")
    with Scope("screen-1") as scope:
        match await B.bridge(accounts.login, context=scope):
            case Ok(credential):
                print(f"  ✓ Logged in: {credential}")
            case Error(e):
                print(f"  ✗ {e}")

    banner("Bridge: scope closed mid-flight")
    scope = Scope("screen-2")
    pending = asyncio.ensure_future(B.bridge(accounts.login, context=scope)())
    await asyncio.sleep(0.05)
    scope.close()
    print("  ← Screen closed")

    match await pending:
        case Ok(credential):
            print(f"  ✓ Logged in: {credential}")
        case Error(e):
            print(f"  ✗ Settled with {e.kind.name}")


if __name__ == "__main__":
    run(main)
