"""SignSpeak: webcam ASL letter recognition on hand landmarks."""

__version__ = "0.1.0"
