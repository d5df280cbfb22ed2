from __future__ import annotations

from collections.abc import Callable

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.models import Game, Outcome
from ..core.rules import moves_for


class RichPresenter:
    def __init__(
        self,
        *,
        no_color: bool = False,
        console: Console | None = None,
        input_fn: Callable[[str], str] = input,
    ) -> None:
        if console is not None:
            self.console = console
        elif no_color:
            self.console = Console(force_terminal=False, color_system=None)
        else:
            self.console = Console(force_terminal=True, color_system="auto")
        self._input = input_fn
        self.quit_requested = False

    def start_game(self, game: Game) -> None:
        moves = ", ".join(str(move) for move in game.legal_moves)
        guide = (
            f"[bold]{game.heap_size}[/] tokens on the heap. Each turn take one of: [bold]{moves}[/].\n"
            "Whoever takes the [bold red]last[/] token loses.\n"
            f"You move first; the computer plays the [bold]{game.strategy}[/] strategy.\n\n"
            "[bold]Controls[/]: number = take tokens • h = help • q = quit"
        )
        self.console.print(Panel(guide, title="Nim", border_style="green"))
        self.console.print()

    def show_state(self, game: Game) -> None:
        state = game.require_state()
        info = Table.grid(padding=(0, 1))
        info.add_column(style="bold cyan", justify="right")
        info.add_column(justify="left")
        info.add_row("Turn", str(state.turn_index))
        info.add_row("Heap", f"{self._heap_bar(state.heap_size)} [dim]({state.heap_size})[/]")
        info.add_row("Allowed", ", ".join(str(move) for move in moves_for(game)) or "-")
        self.console.print(Panel(info, title="Table", border_style="magenta", expand=False))

    def prompt_move(self, game: Game) -> int | None:
        allowed = moves_for(game)
        while True:
            raw = self._input(f"Take how many ({'/'.join(str(m) for m in allowed)}), or 'q' to quit: ").strip().lower()
            if raw == "q":
                self.quit_requested = True
                return None
            if raw in {"h", "help"}:
                self._print_help(game)
                continue
            if raw.isdigit() and int(raw) in allowed:
                return int(raw)
            self.console.print(f"[red]Invalid input[/]. Enter one of {', '.join(str(m) for m in allowed)} or 'q'.")

    def show_round(self, before: Game, after: Game) -> None:
        new_states = after.history[len(before.history) :]
        previous = before.require_state()
        table = Table(show_header=True, header_style="bold blue", box=box.SIMPLE_HEAVY)
        table.add_column("Who", style="bold")
        table.add_column("Took", justify="right")
        table.add_column("Left", justify="right")
        for state in new_states:
            # The state records whose turn is next, so the mover is the other side.
            mover = "Computer" if state.is_players_turn else "You"
            table.add_row(mover, str(previous.heap_size - state.heap_size), str(state.heap_size))
            previous = state
        self.console.print(table)

    def summary(self, game: Game) -> None:
        if game.outcome is Outcome.PLAYER:
            self.console.print(Panel("[bold green]You win![/] The computer had to take the last token.", expand=False))
        elif game.outcome is Outcome.COMPUTER:
            self.console.print(Panel("[bold red]The computer wins.[/]", expand=False))
        else:
            self.console.print("[dim]Game abandoned.[/]")

    # --- helpers ---
    def _print_help(self, game: Game) -> None:
        table = Table(show_header=False)
        table.add_row("Take tokens:", ", ".join(str(move) for move in moves_for(game)))
        table.add_row("Rule:", "taking the last token loses")
        table.add_row("Help:", "h")
        table.add_row("Quit:", "q")
        self.console.print(Panel.fit(table, title="Controls", style="dim"))

    @staticmethod
    def _heap_bar(size: int, limit: int = 40) -> str:
        if size > limit:
            return "[yellow]" + "|" * limit + "[/]…"
        return "[yellow]" + "|" * size + "[/]"
