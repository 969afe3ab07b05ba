"""Command-line interface: history listing, event watching and the terminal picker."""
