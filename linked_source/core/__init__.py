"""GUI-agnostic core: index, ancestor walk, highlight and navigation."""
