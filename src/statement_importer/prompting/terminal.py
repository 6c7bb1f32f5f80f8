from typing import Optional, Sequence, TextIO

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from statement_importer.categorization.patterns import OutboundPattern
from statement_importer.domain.enums import Direction, Sphere
from statement_importer.domain.models import RawEntry
from statement_importer.prompting.base import Prompter


class RichPrompter(Prompter):
    """
    Terminal prompter built on rich prompts.

    Invalid answers are re-asked in place, so none of these methods raise
    on bad user input.

    Example:
        prompter = RichPrompter(Console())
        category = prompter.ask_category(["books", "rent"])
    """

    def __init__(self, console: Console, stream: Optional[TextIO] = None):
        """
        Args:
            console: Console used for output and input
            stream: Optional input stream (defaults to stdin)
        """
        self.console = console
        self.stream = stream

    def _confirm(self, question: str, default: bool) -> bool:
        return Confirm.ask(question, console=self.console, default=default, stream=self.stream)

    def _ask(self, question: str, **kwargs) -> str:
        return Prompt.ask(question, console=self.console, stream=self.stream, **kwargs)

    def show_entry(self, entry: RawEntry) -> None:
        colour = "green" if entry.direction == Direction.INBOUND else "red"
        self.console.print()
        self.console.print(f"[{colour}]{escape(entry.summary())}[/{colour}]")

    def ask_skip_duplicate(self, entry: RawEntry) -> bool:
        self.console.print("[yellow]This entry has already been processed in this run[/yellow]")
        return self._confirm("Skip it?", default=True)

    def ask_personal_override(self, pattern: OutboundPattern) -> bool:
        self.console.print(
            f"[dim]Matched pattern '{escape(pattern.snippet)}' -> {escape(pattern.category)}[/dim]"
        )
        return self._confirm("Assign this entry to personal?", default=pattern.assign_as_personal)

    def ask_category(self, known_categories: Sequence[str]) -> str:
        if known_categories:
            self.console.print("[bold]Existing categories[/bold]")
            for category in known_categories:
                self.console.print(f"  {escape(category)}")

        while True:
            answer = self._ask(
                "Enter the existing category, or leave blank",
                default="",
                show_default=False,
            )
            if not answer:
                return self._ask_new_category()
            if answer in known_categories:
                return answer
            self.console.print(f"[red]Unknown category '{escape(answer)}'[/red]")

    def _ask_new_category(self) -> str:
        while True:
            answer = self._ask("New category:")
            if answer:
                return answer
            self.console.print("[red]Category name cannot be empty[/red]")

    def ask_transfer(self) -> bool:
        return self._confirm("Does this entry represent a transfer between accounts?", default=False)

    def ask_sphere(self) -> Sphere:
        answer = self._ask("Is this a work or a personal entry", choices=["p", "w"])
        return Sphere.PERSONAL if answer == "p" else Sphere.WORK

    def ask_create_pattern(self) -> bool:
        return self._confirm("Would you like to create a pattern from this entry?", default=False)

    def ask_snippet(self, description: str) -> str:
        while True:
            answer = self._ask("Please provide the snippet")
            if answer and answer in description:
                return answer
            self.console.print(f"[red]Snippet must be part of '{escape(description)}'[/red]")

    def ask_require_confirmation(self, sphere: Sphere) -> bool:
        always = self._confirm(f"Should this always be assigned to {sphere.value}?", default=True)
        return not always
