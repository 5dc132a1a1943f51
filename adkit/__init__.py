"""Building blocks for ad serving: batching, parallel work, frequency caps, storage and models."""

__version__ = "0.1.0"