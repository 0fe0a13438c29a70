"""Fantasy stock portfolio tracking: order storage, holdings and market prices."""

__version__ = "0.1.0"