"""gitshelf CLI subcommands."""
