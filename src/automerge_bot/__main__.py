"""Allow running the bot with `python -m automerge_bot`."""

from automerge_bot.cli import main

if __name__ == "__main__":
    main()
