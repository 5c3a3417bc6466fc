"""flowbot - command routing for Flowdock chat streams."""

__version__ = "0.3.0"
__logo__ = "🌊"
