"""termchat — stream a single prompt to a hosted model and render the reply."""

__version__ = "0.4.0"
