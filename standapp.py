#!/usr/bin/env python3
"""
standapp - Terminal client for the stand-evaluation server
Evaluate exhibition stands, manage stands, rooms and criteria and follow the
live ranking from the shell.
"""

import json
import logging
import os
import sys
import argparse
import getpass
from typing import Callable, Dict, List, Optional

from colorama import init, Fore, Style
from dotenv import load_dotenv

from app.models import Criterion, RankingEntry, Room, Stand
from app.repositories import PreferencesRepository, SessionRepository
from app.services import (
    AboutService, AuthService, DashboardService, EvaluationService,
    ManageCriteriaService, ManageRoomsService, ManageStandsService,
    MutationResult, PageService, RankingService, ThemeService,
)

# Initialize colorama for cross-platform colored terminal output
init(autoreset=True)

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def setup_logging(level: str = 'WARNING') -> logging.Logger:
    """Configure the root standapp logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to WARNING so normal use is quiet.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, level.upper(), logging.WARNING)
    logger = logging.getLogger('standapp')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger


logger = setup_logging()

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULT_CONFIG: Dict = {
    'server_address': '',
    'timeout': 10,
    'log_level': 'WARNING',
    'session_file': '.standapp_session.json',
    'preferences_file': '.standapp_preferences.json',
}

_ENV_OVERRIDES = {
    'STANDAPP_SERVER': 'server_address',
    'STANDAPP_USERNAME': 'username',
    'STANDAPP_PASSWORD': 'password',
    'STANDAPP_LOG_LEVEL': 'log_level',
    'STANDAPP_TIMEOUT': 'timeout',
}


class ConfigError(Exception):
    """Raised when the config file exists but cannot be used."""


def load_config(config_path: str = 'config.json') -> Dict:
    """Load configuration from a JSON file with environment variable support.

    A missing file is not an error: defaults are used.  Environment
    variables (also read from ``.env``) take precedence over file values:

    - STANDAPP_SERVER overrides server_address
    - STANDAPP_USERNAME / STANDAPP_PASSWORD provide login credentials
    - STANDAPP_LOG_LEVEL overrides log_level
    - STANDAPP_TIMEOUT overrides timeout (seconds)

    Raises:
        ConfigError: The file is not valid JSON, not an object, or
                     ``timeout`` is not a positive integer.
    """
    load_dotenv()
    config = dict(DEFAULT_CONFIG)

    if os.path.exists(config_path):
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Error parsing config file '{config_path}': {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file '{config_path}' must contain a JSON object")
        config.update(data)
    else:
        logger.debug("Config file %s not found, using defaults", config_path)

    for env_name, key in _ENV_OVERRIDES.items():
        if os.getenv(env_name):
            config[key] = os.getenv(env_name)

    try:
        config['timeout'] = int(config['timeout'])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"timeout must be an integer, got {config['timeout']!r}") from e
    if config['timeout'] <= 0:
        raise ConfigError("timeout must be positive")

    return config


# ---------------------------------------------------------------------------
# Rendering helpers
# ---------------------------------------------------------------------------

def format_score(score: float) -> str:
    """Scores are shown without decimals when they are whole numbers."""
    if float(score).is_integer():
        return str(int(score))
    return f"{score:.1f}"


def render_stands(stands: List[Stand]) -> List[str]:
    """Return printable lines for the stands table."""
    if not stands:
        return [f"{Fore.YELLOW}No stands have been created yet."]
    lines = [f"{Fore.CYAN}{'ID':>4}  {'Name':<30} {'Room':<20} Description"]
    for s in stands:
        room = s.room_name or '(no room)'
        desc = (s.description or '').replace('\n', ' ')
        if len(desc) > 40:
            desc = desc[:37] + '...'
        lines.append(f"{Fore.WHITE}{s.id:>4}  {(s.name or ''):<30} {room:<20} {desc}")
    return lines


def render_rooms(rooms: List[Room]) -> List[str]:
    if not rooms:
        return [f"{Fore.YELLOW}No rooms have been created yet."]
    return [f"{Fore.WHITE}{r.id:>4}  {r.name or ''}" for r in rooms]


def render_ranking(entries: List[RankingEntry]) -> List[str]:
    """Return printable lines for the leaderboard."""
    if not entries:
        return [f"{Fore.YELLOW}No ranking data available yet."]
    lines = [f"{Fore.CYAN}{'#':>3}  {'Stand':<30} {'Room':<20} {'Points':>8} {'Evaluators':>10}"]
    for e in entries:
        colour = Fore.YELLOW if e.rank <= 3 else Fore.WHITE
        lines.append(
            f"{colour}{e.rank:>3}. {(e.stand_name or ''):<30} {(e.room_name or '-'):<20} "
            f"{format_score(e.total_score):>8} {e.evaluator_count:>10}"
        )
    return lines


def render_criteria(criteria: List[Criterion]) -> List[str]:
    if not criteria:
        return [f"{Fore.YELLOW}No criteria have been created yet."]
    lines = [f"{Fore.CYAN}{'ID':>4}  {'Name':<30} {'Max':>5}  Description"]
    for c in criteria:
        desc = (c.description or '').replace('\n', ' ')
        lines.append(f"{Fore.WHITE}{c.id:>4}  {(c.name or ''):<30} {c.max_score:>5}  {desc}")
    return lines


def _count_text(value: Optional[int]) -> str:
    return '-' if value is None else str(value)


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

class StandApp:
    """Interactive terminal front end.

    All server access goes through the page services; this class only reads
    their ``state`` and prints it.
    """

    def __init__(self, config: Dict,
                 input_func: Callable[[str], str] = input,
                 password_func: Callable[[str], str] = getpass.getpass):
        self.config = config
        self._input = input_func
        self._password = password_func
        self._log = logging.getLogger('standapp.cli')
        self.auth = AuthService(SessionRepository(config['session_file']),
                                timeout=config['timeout'])
        self.theme = ThemeService(PreferencesRepository(config['preferences_file']))

    # ------------------------------------------------------------------
    # Dialog helpers
    # ------------------------------------------------------------------

    def prompt(self, text: str) -> str:
        return self._input(f"{Fore.GREEN}{text}{Fore.WHITE}").strip()

    def confirm(self, title: str, message: str) -> bool:
        """Yes/no dialog; anything but an explicit yes counts as no."""
        print(f"\n{Fore.RED}{Style.BRIGHT}{title}")
        answer = self._input(f"{Fore.YELLOW}{message} (y/n): {Fore.WHITE}").strip().lower()
        return answer in ('y', 'yes')

    @staticmethod
    def show_result(result: Optional[MutationResult]) -> None:
        if result is None:
            print(f"{Fore.YELLOW}Cancelled.")
            return
        colour = Fore.GREEN if result.ok else Fore.RED
        print(f"{colour}{result.title}: {Fore.WHITE}{result.message}")

    def _choose_room(self, rooms: List[Room], current: Optional[Room] = None) -> Optional[int]:
        """Pick a room id from *rooms*; empty input keeps *current*, '0' means none."""
        if not rooms:
            return None
        for i, room in enumerate(rooms, 1):
            marker = ' *' if current is not None and room == current else ''
            print(f"{Fore.YELLOW}{i}. {Fore.WHITE}{room.name}{marker}")
        print(f"{Fore.YELLOW}0. {Fore.WHITE}(no room)")
        raw = self.prompt("Room (number, empty = keep): ")
        if raw == '':
            return current.id if current is not None else None
        try:
            choice = int(raw)
        except ValueError:
            print(f"{Fore.RED}Invalid choice, no room assigned.")
            return None
        if 1 <= choice <= len(rooms):
            return rooms[choice - 1].id
        return None

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def login(self, server: Optional[str] = None, username: Optional[str] = None,
              password: Optional[str] = None) -> bool:
        """Log in, prompting for whatever was not supplied."""
        session = self.auth.session
        server = server or self.config.get('server_address') or session.server_address
        username = username or self.config.get('username') or session.username
        password = password or self.config.get('password')

        if not server:
            server = self.prompt("Server address (e.g. http://192.168.0.10:5000): ")
        if not username:
            username = self.prompt("Username: ")
        if not password:
            password = self._password("Password: ")

        result = self.auth.login(server, username, password)
        if result.ok:
            print(f"{Fore.GREEN}{result.message}")
            if result.redirect_to_setup:
                print(f"{Fore.YELLOW}The server requires the initial admin setup. "
                      f"Please complete it in the web interface first.")
        else:
            print(f"{Fore.RED}{result.message}")
        return result.ok

    def logout(self) -> None:
        if self.auth.logout():
            print(f"{Fore.GREEN}Logged out.")
        else:
            print(f"{Fore.YELLOW}Local session cleared (the server did not confirm the logout).")

    def _client_or_login(self):
        if not self.auth.is_logged_in():
            print(f"{Fore.YELLOW}You are not logged in.")
            if not self.login():
                return None
        return self.auth.client(self.config.get('server_address'))

    # ------------------------------------------------------------------
    # Screens
    # ------------------------------------------------------------------

    def _render_page(self, service: PageService, title: str) -> bool:
        """Print header, access-denied or error text.  Returns ``True`` when
        the page body can be rendered."""
        state = service.state
        print(f"\n{Fore.CYAN}{Style.BRIGHT}{title}")
        print(f"{Fore.WHITE}{'=' * 60}")
        if state.access_denied:
            print(f"{Fore.RED}🔒 {service.access_denied_text()}")
            return False
        if state.error_message:
            print(f"{Fore.RED}{state.error_message}")
            return False
        return True

    def show_ranking(self, top: Optional[int] = None) -> bool:
        client = self._client_or_login()
        if client is None:
            return False
        service = RankingService(client)
        service.load()
        if not self._render_page(service, f"{service.state.theme.title} - Ranking"):
            return False
        entries = service.top(top) if top else service.state.entries
        for line in render_ranking(entries):
            print(line)
        return True

    def list_stands(self) -> bool:
        client = self._client_or_login()
        if client is None:
            return False
        service = ManageStandsService(client)
        service.load()
        if not self._render_page(service, "Manage stands"):
            return False
        for line in render_stands(service.state.stands):
            print(line)
        return True

    def list_rooms(self) -> bool:
        client = self._client_or_login()
        if client is None:
            return False
        service = ManageRoomsService(client)
        service.load()
        if not self._render_page(service, "Manage rooms"):
            return False
        for line in render_rooms(service.state.rooms):
            print(line)
        return True

    def stands_menu(self) -> None:
        """Create, edit and delete stands until the user goes back."""
        client = self._client_or_login()
        if client is None:
            return
        service = ManageStandsService(client)
        service.load()

        while True:
            if not self._render_page(service, "Manage stands"):
                if service.state.access_denied:
                    return
                choice = self.prompt("r = retry, b = back: ").lower()
                if choice == 'r':
                    service.load()
                    continue
                return

            for line in render_stands(service.state.stands):
                print(line)
            print(f"\n{Fore.YELLOW}c. {Fore.WHITE}Create stand   "
                  f"{Fore.YELLOW}e. {Fore.WHITE}Edit   "
                  f"{Fore.YELLOW}d. {Fore.WHITE}Delete   "
                  f"{Fore.YELLOW}v. {Fore.WHITE}View description   "
                  f"{Fore.YELLOW}r. {Fore.WHITE}Refresh   "
                  f"{Fore.YELLOW}b. {Fore.WHITE}Back")
            choice = self.prompt("Enter your choice: ").lower()

            if choice == 'b':
                return
            elif choice == 'r':
                service.load()
            elif choice == 'c':
                name = self.prompt("Stand name: ")
                description = self.prompt("Description (optional): ")
                room_id = self._choose_room(service.state.rooms)
                self.show_result(service.create_stand(name, description, room_id))
            elif choice in ('e', 'd', 'v'):
                stand = self._pick_stand(service)
                if stand is None:
                    continue
                if choice == 'v':
                    print(f"\n{Fore.CYAN}Full description:\n{Fore.WHITE}"
                          f"{stand.description or '(no description)'}")
                elif choice == 'e':
                    name = self.prompt(f"Stand name [{stand.name}]: ") or stand.name
                    description = self.prompt(
                        f"Description [{stand.description or ''}]: ") or (stand.description or '')
                    room_id = self._choose_room(service.state.rooms, service.room_for(stand))
                    self.show_result(service.edit_stand(stand.id, name, description, room_id))
                else:
                    self.show_result(service.delete_stand(stand.id, stand.name, self.confirm))
            else:
                print(f"{Fore.RED}Invalid choice. Please try again.")

    def _pick_stand(self, service: ManageStandsService) -> Optional[Stand]:
        raw = self.prompt("Stand ID: ")
        try:
            stand = service.find_stand(int(raw))
        except ValueError:
            stand = None
        if stand is None:
            print(f"{Fore.RED}Stand not found.")
        return stand

    def rooms_menu(self) -> None:
        client = self._client_or_login()
        if client is None:
            return
        service = ManageRoomsService(client)
        service.load()

        while True:
            if not self._render_page(service, "Manage rooms"):
                if service.state.access_denied:
                    return
                if self.prompt("r = retry, b = back: ").lower() == 'r':
                    service.load()
                    continue
                return

            for line in render_rooms(service.state.rooms):
                print(line)
            print(f"\n{Fore.YELLOW}c. {Fore.WHITE}Create room   "
                  f"{Fore.YELLOW}e. {Fore.WHITE}Rename   "
                  f"{Fore.YELLOW}d. {Fore.WHITE}Delete   "
                  f"{Fore.YELLOW}r. {Fore.WHITE}Refresh   "
                  f"{Fore.YELLOW}b. {Fore.WHITE}Back")
            choice = self.prompt("Enter your choice: ").lower()

            if choice == 'b':
                return
            elif choice == 'r':
                service.load()
            elif choice == 'c':
                self.show_result(service.save_room(self.prompt("Room name: ")))
            elif choice in ('e', 'd'):
                raw = self.prompt("Room ID: ")
                room = next((r for r in service.state.rooms if str(r.id) == raw), None)
                if room is None:
                    print(f"{Fore.RED}Room not found.")
                    continue
                if choice == 'e':
                    name = self.prompt(f"Room name [{room.name}]: ") or room.name
                    self.show_result(service.save_room(name, room.id))
                else:
                    self.show_result(service.delete_room(room.id, room.name, self.confirm))
            else:
                print(f"{Fore.RED}Invalid choice. Please try again.")

    def show_dashboard(self) -> bool:
        """Start page: own evaluation count, open inspections and the top three."""
        client = self._client_or_login()
        if client is None:
            return False
        service = DashboardService(client)
        state = service.load()
        print(f"\n{Fore.CYAN}{Style.BRIGHT}{state.theme.title}")
        print(f"{Fore.WHITE}{'=' * 60}")
        print(f"{Fore.WHITE}Welcome, {self.auth.session.username or 'guest'}.")
        print(f"{Fore.YELLOW}Your evaluations: {Fore.WHITE}{_count_text(state.my_evaluation_count)}")
        if service.can_inspect:
            print(f"{Fore.YELLOW}Rooms not yet inspected: {Fore.WHITE}"
                  f"{_count_text(state.open_room_count)}")
        print(f"\n{Fore.CYAN}Top stands")
        for line in render_ranking(state.top_rankings):
            print(line)
        return True

    def list_criteria(self) -> bool:
        client = self._client_or_login()
        if client is None:
            return False
        service = ManageCriteriaService(client)
        service.load()
        if not self._render_page(service, "Manage criteria"):
            return False
        for line in render_criteria(service.state.criteria):
            print(line)
        return True

    def criteria_menu(self) -> None:
        client = self._client_or_login()
        if client is None:
            return
        service = ManageCriteriaService(client)
        service.load()

        while True:
            if not self._render_page(service, "Manage criteria"):
                if service.state.access_denied:
                    return
                if self.prompt("r = retry, b = back: ").lower() == 'r':
                    service.load()
                    continue
                return

            for line in render_criteria(service.state.criteria):
                print(line)
            print(f"\n{Fore.YELLOW}c. {Fore.WHITE}Create criterion   "
                  f"{Fore.YELLOW}e. {Fore.WHITE}Edit   "
                  f"{Fore.YELLOW}d. {Fore.WHITE}Delete   "
                  f"{Fore.YELLOW}r. {Fore.WHITE}Refresh   "
                  f"{Fore.YELLOW}b. {Fore.WHITE}Back")
            choice = self.prompt("Enter your choice: ").lower()

            if choice == 'b':
                return
            elif choice == 'r':
                service.load()
            elif choice == 'c':
                name = self.prompt("Criterion name: ")
                max_score = self.prompt("Maximum score: ")
                description = self.prompt("Description (optional): ")
                self.show_result(service.create_criterion(name, max_score, description))
            elif choice in ('e', 'd'):
                raw = self.prompt("Criterion ID: ")
                criterion = next((c for c in service.state.criteria if str(c.id) == raw), None)
                if criterion is None:
                    print(f"{Fore.RED}Criterion not found.")
                    continue
                if choice == 'e':
                    name = self.prompt(f"Criterion name [{criterion.name}]: ") or criterion.name
                    max_score = (self.prompt(f"Maximum score [{criterion.max_score}]: ")
                                 or criterion.max_score)
                    description = (self.prompt(f"Description [{criterion.description or ''}]: ")
                                   or (criterion.description or ''))
                    self.show_result(service.edit_criterion(criterion.id, name, max_score,
                                                            description))
                else:
                    self.show_result(service.delete_criterion(criterion.id, criterion.name,
                                                              self.confirm))
            else:
                print(f"{Fore.RED}Invalid choice. Please try again.")

    def evaluate_menu(self) -> None:
        """Pick a stand and enter one score per criterion.

        Each prompt shows the score already given (if any); pressing enter
        keeps it.
        """
        client = self._client_or_login()
        if client is None:
            return
        service = EvaluationService(client)
        service.load()
        state = service.state

        while True:
            if not self._render_page(service, "Evaluate a stand"):
                if state.access_denied:
                    return
                if self.prompt("r = retry, b = back: ").lower() == 'r':
                    service.load()
                    continue
                return
            if not state.stands:
                print(f"{Fore.YELLOW}There are no stands to evaluate.")
                return

            for i, stand in enumerate(state.stands, 1):
                room = f" ({stand.room_name})" if stand.room_name else ''
                print(f"{Fore.YELLOW}{i}. {Fore.WHITE}{stand.name}{room}")
            raw = self.prompt("Stand (number, b = back): ").lower()
            if raw == 'b':
                return
            try:
                index = int(raw)
            except ValueError:
                index = 0
            if not 1 <= index <= len(state.stands):
                print(f"{Fore.RED}Invalid choice. Please try again.")
                continue

            service.select_stand(state.stands[index - 1].id)
            if state.error_message:
                continue
            if state.last_evaluation:
                print(f"{Fore.YELLOW}Already evaluated on {state.last_evaluation}; "
                      f"saving overwrites it.")

            scores = {}
            for criterion in state.criteria:
                current = state.existing_scores.get(criterion.id)
                default = '' if current is None else str(current)
                answer = self.prompt(f"{criterion.name} (0-{criterion.max_score}) [{default}]: ")
                scores[criterion.id] = answer or default
            result = service.submit(scores)
            if state.rejected_criteria:
                print(f"{Fore.YELLOW}Ignored invalid scores for: "
                      f"{', '.join(state.rejected_criteria)}")
            self.show_result(result)

    def show_about(self) -> None:
        client = self.auth.client(self.config.get('server_address'))
        session = self.auth.session
        print(f"\n{Fore.CYAN}{Style.BRIGHT}About")
        print(f"{Fore.WHITE}{'=' * 40}")
        print(f"{Fore.YELLOW}Server: {Fore.WHITE}{session.server_address or '-'}")
        print(f"{Fore.YELLOW}User: {Fore.WHITE}{session.username or '-'} "
              f"({session.user_role or 'no role'})")
        print(f"{Fore.YELLOW}Theme: {Fore.WHITE}{'dark' if self.theme.dark_mode else 'light'}")
        if client is not None:
            versions = AboutService(client).get_versions()
            print(f"{Fore.YELLOW}Frontend version: {Fore.WHITE}{versions['frontend_version']}")
            print(f"{Fore.YELLOW}Backend version: {Fore.WHITE}{versions['backend_version']}")

    def interactive_mode(self) -> None:
        """Run in interactive mode"""
        while True:
            session = self.auth.session
            status = (f"{session.username} @ {session.server_address}"
                      if self.auth.is_logged_in() else "not logged in")
            print(f"\n{Fore.CYAN}{Style.BRIGHT}standapp {Style.RESET_ALL}{Fore.WHITE}({status})")
            print(f"{Fore.WHITE}{'=' * 40}")
            print(f"{Fore.YELLOW}1. {Fore.WHITE}Start page")
            print(f"{Fore.YELLOW}2. {Fore.WHITE}Ranking")
            print(f"{Fore.YELLOW}3. {Fore.WHITE}Evaluate a stand")
            print(f"{Fore.YELLOW}4. {Fore.WHITE}Manage stands")
            print(f"{Fore.YELLOW}5. {Fore.WHITE}Manage rooms")
            print(f"{Fore.YELLOW}6. {Fore.WHITE}Manage criteria")
            print(f"{Fore.YELLOW}7. {Fore.WHITE}Toggle dark mode")
            print(f"{Fore.YELLOW}8. {Fore.WHITE}About")
            if self.auth.is_logged_in():
                print(f"{Fore.YELLOW}o. {Fore.WHITE}Log out")
            else:
                print(f"{Fore.YELLOW}l. {Fore.WHITE}Log in")
            print(f"{Fore.YELLOW}q. {Fore.WHITE}Quit")
            print(f"{Fore.WHITE}{'=' * 40}")

            choice = self.prompt("\nEnter your choice: ").lower()

            if choice == 'q':
                print(f"\n{Fore.CYAN}Goodbye!")
                break
            elif choice == '1':
                self.show_dashboard()
            elif choice == '2':
                self.show_ranking()
            elif choice == '3':
                self.evaluate_menu()
            elif choice == '4':
                self.stands_menu()
            elif choice == '5':
                self.rooms_menu()
            elif choice == '6':
                self.criteria_menu()
            elif choice == '7':
                dark = self.theme.toggle()
                print(f"{Fore.GREEN}Switched to {'dark' if dark else 'light'} mode.")
            elif choice == '8':
                self.show_about()
            elif choice == 'l':
                self.login()
            elif choice == 'o':
                self.logout()
            else:
                print(f"{Fore.RED}Invalid choice. Please try again.")


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='standapp - terminal client for the stand-evaluation server',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 standapp.py                              # Run in interactive mode
  python3 standapp.py --login --server http://10.0.0.5:5000 --username alice
  python3 standapp.py --ranking --top 3            # Show the top three stands
  python3 standapp.py --dashboard                  # Start page summary
  python3 standapp.py --list-stands                # List stands (Administrator)
  python3 standapp.py --list-criteria              # List criteria (Administrator)
  python3 standapp.py --logout
        """
    )

    parser.add_argument(
        '--config', '-c',
        default='config.json',
        help='Path to config file (default: config.json)'
    )
    parser.add_argument('--server', help='Server address, e.g. http://192.168.0.10:5000')
    parser.add_argument('--username', '-u', help='Username for --login')
    parser.add_argument(
        '--login',
        action='store_true',
        help='Log in and store the session, then exit'
    )
    parser.add_argument(
        '--logout',
        action='store_true',
        help='Log out and forget the stored session'
    )
    parser.add_argument(
        '--ranking', '-r',
        action='store_true',
        help='Show the ranking and exit'
    )
    parser.add_argument(
        '--top',
        type=int,
        metavar='N',
        help='With --ranking: only show the first N entries'
    )
    parser.add_argument(
        '--list-stands',
        action='store_true',
        help='List all stands and exit (Administrator role required)'
    )
    parser.add_argument(
        '--list-rooms',
        action='store_true',
        help='List all rooms and exit (Administrator role required)'
    )
    parser.add_argument(
        '--list-criteria',
        action='store_true',
        help='List all scoring criteria and exit (Administrator role required)'
    )
    parser.add_argument(
        '--dashboard',
        action='store_true',
        help='Show the start page summary and exit'
    )
    parser.add_argument(
        '--toggle-dark-mode',
        action='store_true',
        help='Switch between light and dark mode and exit'
    )
    parser.add_argument(
        '--log-level',
        help='Log level (DEBUG, INFO, WARNING, ERROR)'
    )

    args = parser.parse_args(argv)

    if args.top is not None and args.top < 1:
        print(f"{Fore.RED}Error: --top must be at least 1")
        sys.exit(1)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"{Fore.RED}{e}")
        sys.exit(1)

    setup_logging(args.log_level or config.get('log_level', 'WARNING'))

    try:
        standapp = StandApp(config)

        if args.logout:
            standapp.logout()
            return
        if args.login:
            if not standapp.login(server=args.server, username=args.username):
                sys.exit(1)
            return
        if args.toggle_dark_mode:
            dark = standapp.theme.toggle()
            print(f"{Fore.GREEN}Switched to {'dark' if dark else 'light'} mode.")
            return
        if args.ranking:
            if not standapp.show_ranking(top=args.top):
                sys.exit(1)
            return
        if args.list_stands:
            if not standapp.list_stands():
                sys.exit(1)
            return
        if args.list_rooms:
            if not standapp.list_rooms():
                sys.exit(1)
            return
        if args.list_criteria:
            if not standapp.list_criteria():
                sys.exit(1)
            return
        if args.dashboard:
            if not standapp.show_dashboard():
                sys.exit(1)
            return

        standapp.interactive_mode()
    except KeyboardInterrupt:
        print(f"\n\n{Fore.YELLOW}Interrupted by user. Goodbye!")
    except Exception as e:
        logger.exception("Unexpected error")
        print(f"\n{Fore.RED}An unexpected error occurred: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
