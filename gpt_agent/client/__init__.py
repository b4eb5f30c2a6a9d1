"""Terminal client: input loop, answer rendering and turn persistence."""
