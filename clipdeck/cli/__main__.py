"""Allow `python -m clipdeck.cli`."""

from clipdeck.cli.main import main

main()
