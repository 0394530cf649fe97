"""Entry point for SongGuess: guess the song from a playing track."""

import argparse
import logging
import os
import sys


def main():
    from songguess.config import LOG_LEVEL_ENV_VAR

    logging.basicConfig(
        level=os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(description="Guess the song: pause the track and name it.")
    parser.add_argument("--challenge", help="JSON file listing the challenge track ids, in order")
    args = parser.parse_args()

    challenge = None
    if args.challenge:
        from songguess.ui.app import load_challenge

        try:
            challenge = load_challenge(args.challenge)
        except (OSError, ValueError) as e:
            print(f"Invalid challenge file: {e}")
            sys.exit(1)

    from songguess.ui.app import run_app

    run_app(challenge=challenge)


if __name__ == "__main__":
    main()
