"""
Presentation shell — busy indicator around a run, then render the outcome.
"""

from __future__ import annotations

import logging

from kungfu import Ok, Error
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from oneshot._types import Outcome
from oneshot.api import RecordList
from oneshot.context import Scope
from oneshot.sequence import CompletionAccounts, NativeAccounts, Sequencer, Stage, Strategy

logger = logging.getLogger(__name__)


class Screen:
    """
    Owns a Scope for its lifetime and shows a spinner while a run is in flight.

    Closing the screen tears the scope down; runs still in flight settle
    with CONTEXT_GONE.
    """

    def __init__(self, name: str = "home", console: Console | None = None) -> None:
        self.scope = Scope(name)
        self.console = console or Console()

    async def present(
        self,
        api: CompletionAccounts | NativeAccounts,
        strategy: Strategy = Strategy.BRIDGE,
    ) -> Outcome[RecordList]:
        with self.console.status(f"[bold]{strategy.value}[/bold]: starting") as status:

            def show(stage: Stage) -> None:
                status.update(f"[bold]{strategy.value}[/bold]: {stage.value}")

            sequencer = Sequencer(api, context=self.scope, listener=show)
            outcome = await sequencer.run(strategy)

        self.render(strategy, outcome)
        return outcome

    def render(self, strategy: Strategy, outcome: Outcome[RecordList]) -> None:
        match outcome:
            case Ok(records):
                table = Table(title=f"Users ({strategy.value})", show_header=True)
                table.add_column("ID", style="cyan", justify="right")
                table.add_column("Name")
                table.add_column("Email")
                for record in records:
                    table.add_row(
                        str(record.id),
                        f"{record.first_name} {record.last_name}",
                        record.email,
                    )
                self.console.print(table)
            case Error(err):
                logger.info("%s run failed: %s", strategy.value, err)
                self.console.print(f"[red]❌ {strategy.value} failed: {escape(str(err))}[/red]")

    def close(self) -> None:
        self.scope.close()


__all__ = ("Screen",)
