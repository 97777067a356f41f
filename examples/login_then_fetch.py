"""
Login, then fetch users — against the configured account API.

Runs every strategy in turn behind a spinner.
ONESHOT_BASE_URL / ONESHOT_API_KEY / ONESHOT_LOG_LEVEL configure it.
"""

from oneshot import api as A
from oneshot import sequence as Q
from oneshot.logging_config import configure_logging
from oneshot.settings import get_settings
from oneshot.shell import Screen
from examples._infra import banner, run


async def main() -> None:
    configure_logging()
    settings = get_settings()
    screen = Screen("home")

    api, transport = A.connect(settings)
    async_api, async_transport = A.connect_async(settings)
    try:
        for strategy in (Q.Strategy.CALLBACKS, Q.Strategy.STREAM, Q.Strategy.BRIDGE):
            banner(f"Strategy: {strategy.value}")
            await screen.present(api, strategy)

        banner(f"Strategy: {Q.Strategy.NATIVE.value}")
        await screen.present(async_api, Q.Strategy.NATIVE)
    finally:
        screen.close()
        transport.close()
        await async_transport.aclose()


if __name__ == "__main__":
    run(main)
