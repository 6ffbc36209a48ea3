"""Command implementations behind the CLI. Each ``run_*`` returns an exit code."""
