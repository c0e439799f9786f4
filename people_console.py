"""Interactive console for the people directory.

This module implements a blocking, menu driven shell on top of
:class:`people_api.PeopleDirectoryAPI`.  Each iteration clears the
screen, prints a numbered menu, reads one line and dispatches it:

* ``1`` – list everybody (first 20 rows shown, true total reported).
* ``2`` – search by first or last name.
* ``3`` – show the details of one person.
* ``4`` – change the first and/or last name of a person.
* ``5`` – delete a person after showing who is about to be removed.
* ``6`` – exit.

Every action runs through :meth:`PeopleConsole.dispatch`, which turns
any failure into a printed message so that a single failed request
never ends the session.

The console reads its configuration from the environment (see
:mod:`people_directory.core.config`):

``PEOPLE_API_BASE_URL``
    Root URL of the OData service.  Required unless given on the
    command line or in ``appsettings.json``.

``PEOPLE_API_KEY``
    Optional bearer token sent with every request.

``LOG_LEVEL`` / ``LOG_FILE``
    Logging verbosity and optional log file.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence, TextIO

from people_api import PeopleDirectoryAPI
from people_directory.core.config import Settings, load_settings
from people_directory.core.logging_config import setup_logging
from people_directory.schemas import Person


logger = logging.getLogger(__name__)

DISPLAY_LIMIT = 20
RULE = "-" * 48
CLEAR_SCREEN = "\033[2J\033[H"
EXIT_CHOICE = "6"
NOT_FOUND = "Person not found!"

MENU = (
    ("1", "List People"),
    ("2", "Search People"),
    ("3", "View Person Details"),
    ("4", "Update Person"),
    ("5", "Delete Person"),
    (EXIT_CHOICE, "Exit"),
)


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one menu action.

    ``ok`` is false only when the action itself failed (an exception was
    raised); "not found" and rejected writes are regular outcomes.
    """

    ok: bool
    message: str = ""

    @classmethod
    def done(cls, message: str = "") -> "ActionResult":
        return cls(True, message)

    @classmethod
    def failed(cls, message: str) -> "ActionResult":
        return cls(False, message)


def render_people(people: Sequence[Person], limit: int = DISPLAY_LIMIT) -> List[str]:
    """Render a result list; only ``limit`` rows are shown but the total is reported."""
    lines = ["", "People List:", RULE]
    for person in people[:limit]:
        lines.append(f"{person.user_name}: {person.first_name} {person.last_name}")
    lines.append(f"Showing {len(people)} results")
    return lines


def render_person(person: Person) -> List[str]:
    name = " ".join(part for part in (person.first_name, person.last_name, person.middle_name) if part)
    date_of_birth = person.date_of_birth.isoformat() if person.date_of_birth else ""
    return [
        "",
        "Person Details:",
        RULE,
        f"Username: {person.user_name}",
        f"Name: {name}",
        f"Email: {person.email}",
        f"Address: {person.address}",
        f"Date of Birth: {date_of_birth}",
    ]


class PeopleConsole:
    """Read-eval-print loop over a :class:`PeopleDirectoryAPI`."""

    def __init__(
        self,
        api: PeopleDirectoryAPI,
        *,
        input_func: Callable[[], str] = input,
        stdout: Optional[TextIO] = None,
    ) -> None:
        self.api = api
        self._input = input_func
        self.stdout = stdout or sys.stdout
        self.actions: Dict[str, Callable[[], ActionResult]] = {
            "1": self._handle_list,
            "2": self._handle_search,
            "3": self._handle_view,
            "4": self._handle_update,
            "5": self._handle_delete,
        }

    # ------------------------------------------------------------------
    # Console helpers
    # ------------------------------------------------------------------
    def _write(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def _write_lines(self, lines: Sequence[str]) -> None:
        for line in lines:
            self._write(line)

    def _prompt(self, text: str) -> str:
        self.stdout.write(text)
        self.stdout.flush()
        return self._input()

    def _clear(self) -> None:
        isatty = getattr(self.stdout, "isatty", None)
        if isatty is not None and isatty():
            self.stdout.write(CLEAR_SCREEN)

    def _show_menu(self) -> None:
        for key, label in MENU:
            self._write(f"{key}. {label}")

    def _pause(self) -> None:
        self._prompt("\nPress Enter to continue...")

    def _report(self, result: ActionResult) -> None:
        if not result.ok:
            self._write(f"Error: {result.message}")
        elif result.message:
            self._write(result.message)

    # ------------------------------------------------------------------
    # Action handlers
    # ------------------------------------------------------------------
    def _handle_list(self) -> ActionResult:
        self._write_lines(render_people(self.api.list_people()))
        return ActionResult.done()

    def _handle_search(self) -> ActionResult:
        term = self._prompt("Enter search term: ")
        self._write_lines(render_people(self.api.search_people(term)))
        return ActionResult.done()

    def _handle_view(self) -> ActionResult:
        user_name = self._prompt("Enter username: ").strip()
        if not user_name:
            return ActionResult.done()
        person = self.api.get_person(user_name)
        if person is None:
            return ActionResult.done(NOT_FOUND)
        self._write_lines(render_person(person))
        return ActionResult.done()

    def _handle_update(self) -> ActionResult:
        user_name = self._prompt("Enter username to update: ").strip()
        if not user_name:
            return ActionResult.done()
        person = self.api.get_person(user_name)
        if person is None:
            return ActionResult.done(NOT_FOUND)

        self._write(f"Editing: {person.full_name}")
        first_name = self._prompt("New first name (leave empty to keep current): ").strip()
        last_name = self._prompt("New last name (leave empty to keep current): ").strip()
        updated = person.with_changes(
            first_name=first_name or person.first_name,
            last_name=last_name or person.last_name,
        )
        if self.api.update_person(updated):
            return ActionResult.done("Person updated successfully!")
        return ActionResult.done("Person was not updated!")

    def _handle_delete(self) -> ActionResult:
        user_name = self._prompt("Enter username to delete: ").strip()
        if not user_name:
            return ActionResult.done()
        person = self.api.get_person(user_name)
        if person is None:
            return ActionResult.done(NOT_FOUND)

        self._write(f"Deleting: {person.full_name}")
        if self.api.delete_person(person.user_name):
            return ActionResult.done("Person deleted successfully!")
        return ActionResult.done("Person was not deleted!")

    # ------------------------------------------------------------------
    # Dispatcher and main loop
    # ------------------------------------------------------------------
    def dispatch(self, choice: str) -> ActionResult:
        """Run the action bound to ``choice`` and capture its outcome."""
        handler = self.actions.get(choice)
        if handler is None:
            return ActionResult.done("Invalid option. Please choose from the list.")
        logger.debug("Dispatching menu option %s", choice)
        try:
            return handler()
        except EOFError:
            raise
        except Exception as exc:
            logger.debug("Menu option %s failed", choice, exc_info=True)
            return ActionResult.failed(str(exc) or exc.__class__.__name__)

    def run(self) -> None:
        """Show the menu and process choices until the user exits."""
        logger.info("People console started")
        try:
            while True:
                self._clear()
                self._show_menu()
                choice = self._prompt("Choose an option: ").strip()
                if not choice:
                    continue
                if choice == EXIT_CHOICE:
                    break
                self._report(self.dispatch(choice))
                self._pause()
        except (EOFError, KeyboardInterrupt):
            self._write()
            logger.info("Console stopped by user.")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Browse and edit the people directory.")
    ap.add_argument("--base-url", help="Root URL of the people service (overrides PEOPLE_API_BASE_URL)")
    ap.add_argument("--api-key", help="Bearer token sent with every request")
    ap.add_argument("--timeout", type=float, help="Request timeout in seconds")
    ap.add_argument("--log-level", help="Logging level, e.g. DEBUG or INFO")
    ap.add_argument("--log-file", help="Write log records to this file as well")
    return ap.parse_args(argv)


def apply_args(config: Settings, args: argparse.Namespace) -> Settings:
    """Return ``config`` with command line overrides applied."""
    overrides = {
        "api_base_url": args.base_url,
        "api_key": args.api_key,
        "request_timeout": args.timeout,
        "log_level": args.log_level,
        "log_file": args.log_file,
    }
    return replace(config, **{k: v for k, v in overrides.items() if v is not None})


def build_api(config: Settings) -> PeopleDirectoryAPI:
    if not config.api_base_url:
        raise RuntimeError(
            "Missing API base URL: set PEOPLE_API_BASE_URL, pass --base-url "
            f"or provide Api.BaseUrl in {config.settings_file}"
        )
    return PeopleDirectoryAPI(
        base_url=config.api_base_url,
        api_key=config.api_key or None,
        timeout=config.request_timeout,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    config = apply_args(load_settings(), parse_args(argv))
    setup_logging(config.log_level, config.log_file or None)
    try:
        api = build_api(config)
    except RuntimeError as exc:
        logger.error(str(exc))
        return 1
    with api:
        PeopleConsole(api).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
