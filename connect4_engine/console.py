"""Play Connect 4 against one of the engines in a terminal."""

import argparse
import logging
import time

from .board import CellState
from .factory import AIManager, AIType, requires_graph_board
from .game import Game
from .players import AIDifficulty


def prompt_column(game):
    """Gets move from user input, expecting 1-7. Returns None on end of input."""
    # Convert to 1-based for display to users
    valid_locations = game.board.get_available_columns()
    valid_locations_display = [loc + 1 for loc in valid_locations]

    # Keep asking for input until a valid move is provided
    while True:
        try:
            col_str = input(f"Your move, choose column ({', '.join(map(str, valid_locations_display))}): ")
        except EOFError:
            return None
        try:
            internal_col = int(col_str) - 1
        except ValueError:
            print("Invalid input. Please enter a number.")
            continue

        if internal_col in valid_locations:
            return internal_col
        print(f"Invalid column {col_str}. Please choose from {valid_locations_display}.")


def finish_turn(game, row, col):
    """Prints the board and reports the end of the game. Returns True if it ended."""
    print("\n" + str(game.board))
    if game.check_victory(row, col):
        winner_name = "You win!" if game.get_turn() == CellState.PLAYER else "AI wins!"
        print(f"\nGame Over! {winner_name}")
        return True
    if game.is_board_full():
        print("\nGame Over! It's a Draw.")
        return True
    game.next_turn()
    return False


def play(game):
    print(str(game.board))

    while not game.is_ended():
        if game.get_turn() == CellState.PLAYER:
            col = prompt_column(game)
            if col is None:
                print("\nBye.")
                return
            row, col = game.apply_move(col, CellState.PLAYER)
        else:
            print(f"\n{game.ai.name} is thinking...")
            start_time = time.time()
            row, col = game.ai_play()
            if row == -1:
                print("\nGame Over! No move left.")
                return
            print(f"AI plays column {col + 1} ({time.time() - start_time:.2f}s)")

        if finish_turn(game, row, col):
            return


def build_parser():
    parser = argparse.ArgumentParser(description="Play Connect 4 against an AI engine.")
    parser.add_argument("--ai", choices=[t.value for t in AIType], default=AIType.MINIMAX_GRAPH.value,
                        help="engine to play against")
    parser.add_argument("--difficulty", choices=[d.value for d in AIDifficulty],
                        default=AIDifficulty.MEDIUM.value)
    parser.add_argument("--verbose", "-v", action="store_true", help="log the engine's search diagnostics")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ai_type = AIType(args.ai)
    print("=======================================")
    print(f"   CONNECT FOUR: Human vs {ai_type.value}")
    print(f"   {AIManager.get_ai_description(ai_type)}")
    print("=======================================")

    # The board kind must match what the engine plays on
    game = Game(difficulty=args.difficulty, ai_type=ai_type,
                use_graph_board=requires_graph_board(ai_type))
    play(game)


if __name__ == "__main__":
    main()
