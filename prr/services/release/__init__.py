"""Release pull request assembly."""
