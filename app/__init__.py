"""Terminal frontend for PlainFiles."""
