"""Scientific Calculator plugin manifest."""

manifest = {
    "title": "Scientific Calculator",
    "summary": "Keypad-driven expression entry with degree/radian modes, Ans chaining and a ten-entry history.",
    "category": "General Utilities",
    "blueprint": "scientific_calculator",
    "api": "/api/scientific_calculator",
}

__all__ = ["manifest"]
