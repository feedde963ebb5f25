#!/usr/bin/env python3
"""
Minimal terminal driver for Word Wizard.

Type a word to guess it. Commands start with a colon:
  :letter X   count X in the secret word (costs points)
  :length     reveal the word length (costs points)
  :hint       synonym hint, unlocked after 5 wrong guesses (costs points)
  :new        start over at level 1
  :top        show the leaderboard
  :quit       leave
"""

import argparse
import asyncio
from typing import List, Optional

from wordwizard import GameConfig, GameSession, LeaderboardEntry, LeaderboardService
from wordwizard.clients import DreamloClient, RandomWordClient, ThesaurusClient
from wordwizard.events import EventType, GameEvent
from wordwizard.exceptions import TransportError, ValidationRejection
from wordwizard.settings import (
    configure_logging,
    get_app_settings,
    get_leaderboard_settings,
    get_word_api_settings,
)
from wordwizard.sources import NoSynonyms


def print_event(event: GameEvent) -> None:
    """Print the events a player cares about."""
    d = event.details
    if event.event_type == EventType.WORD_REQUESTED:
        print("Loading new word...")
    elif event.event_type == EventType.WORD_BOUND:
        print(f"Level {d['level']} - new word loaded! Make your guess.")
    elif event.event_type == EventType.WORD_FETCH_FAILED:
        print(f"Error loading word: {d['reason']} (type :new to try again)")
    elif event.event_type == EventType.GUESS_WRONG:
        print(f"Wrong guess! {d['attempts_left']} attempts left. Score: {d['score']}")
    elif event.event_type == EventType.GUESS_CORRECT:
        print(f"Correct! Solved in {d['seconds']}s with {d['score']} points.")
    elif event.event_type == EventType.LEVEL_UP:
        print(f"Level up! Now at level {d['level']}.")
    elif event.event_type == EventType.GAME_LOST:
        print(f"Game over! The word was '{d['word']}'.")
    elif event.event_type == EventType.SCORE_SUBMITTED:
        print("Score submitted!")
    elif event.event_type == EventType.SCORE_SUBMIT_FAILED:
        print(f"Score not submitted: {d['reason']}")


def print_leaderboard(entries: List[LeaderboardEntry]) -> None:
    """Print leaderboard rows."""
    if not entries:
        print("No scores yet.")
        return
    print(f"{'#':>3}  {'Name':<20} {'Score':>5}  {'Time':>5}")
    for rank, entry in enumerate(entries, start=1):
        print(f"{rank:>3}  {entry.name:<20} {entry.score:>5}  {entry.formatted_time:>5}")


async def show_leaderboard(leaderboard: Optional[LeaderboardService], limit: int) -> None:
    if leaderboard is None:
        print("Leaderboard is not configured (set LEADERBOARD_PRIVATE_CODE and LEADERBOARD_PUBLIC_CODE).")
        return
    try:
        print_leaderboard(await leaderboard.top_scores(limit))
    except TransportError as e:
        print(f"Error loading leaderboard: {e}")


async def handle_command(session: GameSession, line: str, leaderboard: Optional[LeaderboardService], limit: int) -> bool:
    """
    Apply one input line to the session.

    Returns:
        False when the player wants to quit
    """
    command, _, arg = line.strip().partition(" ")

    try:
        if command == ":quit":
            return False
        if command == ":new":
            session.start_new_game()
        elif command == ":top":
            await show_leaderboard(leaderboard, limit)
        elif command == ":length":
            length = session.reveal_word_length()
            if length is not None:
                print(f"The word has {length} letters. Score: {session.score}")
        elif command == ":letter":
            count = session.check_letter(arg.strip())
            if count is not None:
                print(f"'{arg.strip().lower()}' appears {count} time(s). Score: {session.score}")
        elif command == ":hint":
            hint = await session.request_hint()
            if hint is not None:
                print(f"Hint: {hint.text}. Score: {session.score}")
        elif command.startswith(":"):
            print(__doc__)
        elif session.submit_guess(line) is None:
            print("Please wait, no word is active yet.")
    except ValidationRejection as e:
        print(e)

    return True


async def play(player_name: str, verbose: bool = True) -> None:
    """Run an interactive game until the player quits."""
    word_settings = get_word_api_settings()
    board_settings = get_leaderboard_settings()

    words = RandomWordClient.from_settings(word_settings)
    if word_settings.thesaurus_api_key is not None:
        synonyms = ThesaurusClient.from_settings(word_settings)
    else:
        synonyms = NoSynonyms()
    leaderboard = None
    if board_settings.is_configured:
        leaderboard = LeaderboardService(DreamloClient.from_settings(board_settings))

    session = GameSession(
        words,
        synonyms,
        leaderboard,
        player_name=player_name,
        config=GameConfig.from_settings(get_app_settings()),
        listener=print_event if verbose else None,
    )

    print(f"Welcome, {session.player_name}!")
    session.start_new_game()
    try:
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            if not line.strip():
                continue
            if not await handle_command(session, line, leaderboard, board_settings.limit):
                break
    finally:
        await session.aclose()
        await words.aclose()
        if isinstance(synonyms, ThesaurusClient):
            await synonyms.aclose()
        if leaderboard is not None:
            await leaderboard.transport.aclose()


def main():
    """Main entry point for CLI."""
    settings = get_app_settings()
    parser = argparse.ArgumentParser(description="Play Word Wizard in the terminal")
    parser.add_argument("--name", type=str, default=settings.player_name, help="Player name for the leaderboard")
    parser.add_argument(
        "--leaderboard",
        type=int,
        default=None,
        metavar="N",
        help="Print the top N scores and exit",
    )
    parser.add_argument("--quiet", action="store_true", help="Only print answers to commands")
    parser.add_argument("--log-level", type=str, default=None, help="Override WORDWIZARD_LOG_LEVEL")

    args = parser.parse_args()
    configure_logging(args.log_level.upper() if args.log_level else "WARNING")

    if args.leaderboard is not None:
        board_settings = get_leaderboard_settings()
        leaderboard = None
        if board_settings.is_configured:
            leaderboard = LeaderboardService(DreamloClient.from_settings(board_settings))

        async def _show() -> None:
            try:
                await show_leaderboard(leaderboard, args.leaderboard)
            finally:
                if leaderboard is not None:
                    await leaderboard.transport.aclose()

        asyncio.run(_show())
        return

    try:
        asyncio.run(play(args.name, verbose=not args.quiet))
    except KeyboardInterrupt:
        print("\nBye!")


if __name__ == "__main__":
    main()
