"""Configuration, display layout and process bookkeeping for a VR desktop overlay compositor."""

__version__ = "0.1.0"