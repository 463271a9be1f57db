"""verbario: Spanish verb conjugations and English–Hungarian translations backend."""

__version__ = "0.1.0"
