"""Staff side of a customer service desk: question statistics, records, manual takeover and chat sessions."""

__version__ = "1.0.0"