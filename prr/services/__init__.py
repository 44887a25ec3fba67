"""Services orchestrating git, gh and the checklist merge."""
