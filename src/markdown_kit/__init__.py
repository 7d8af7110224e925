"""Convert JSON, HTML, XML, PDF and web pages into Markdown."""

__version__ = "0.1.0"
