"""Stream ingestion."""

from flowbot.stream.listener import StreamListener
from flowbot.stream.source import DEFAULT_STREAM_URL, HttpStreamSource, stream_url

__all__ = ["DEFAULT_STREAM_URL", "HttpStreamSource", "StreamListener", "stream_url"]
