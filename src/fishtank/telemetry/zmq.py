import logging
import struct
from typing import Final

import zmq
import zmq.asyncio

from ..models import HeadSample

logger = logging.getLogger(__name__)

class HeadPublisher:
    """
    Real-time broadcast of the tracked head position using ZMQ PUB/SUB.
    One message per rendered frame, for overlays or external recorders.
    Subscribers turn messages back into HeadSample with `decode`.

    Wire Format (33 bytes + 4 byte topic):
    - Topic: 'head' (4 bytes)
    - Timestamp ms: int64 (8 bytes)
    - X: float64 (8 bytes)
    - Y: float64 (8 bytes)
    - Z: float64 (8 bytes)
    - Tracked: bool (1 byte)
    """

    # ! = Network (Big Endian)
    # q = int64 (timestamp)
    # d = float64 (x, y, z)
    # ? = bool  (face found on the last processed frame)
    _PACKER: Final[struct.Struct] = struct.Struct("!qddd?")
    _TOPIC: Final[bytes] = b"head"

    def __init__(self, host: str = "tcp://*:5556"):
        """
        Args:
            host: The ZMQ binding address. Default binds to all interfaces on port 5556.
        """
        self.host = host

        self._ctx = zmq.asyncio.Context()
        self._sock = self._ctx.socket(zmq.PUB)

        # Drop rather than queue when subscribers fall behind. ~2 seconds at 60 Hz.
        self._sock.setsockopt(zmq.SNDHWM, 60 * 2)

    @property
    def endpoint(self) -> str:
        """The bound address, with any wildcard port resolved."""
        return self._sock.getsockopt_string(zmq.LAST_ENDPOINT)

    @classmethod
    def encode(cls, sample: HeadSample) -> bytes:
        return cls._TOPIC + cls._PACKER.pack(
            sample.timestamp_ms, sample.x, sample.y, sample.z, sample.tracked
        )

    @classmethod
    def decode(cls, message: bytes) -> HeadSample:
        """Subscriber side of `encode`. Raises ValueError for other topics."""
        if not message.startswith(cls._TOPIC):
            raise ValueError(f"Unexpected topic in message: {message[:4]!r}")
        timestamp_ms, x, y, z, tracked = cls._PACKER.unpack(message[len(cls._TOPIC):])
        return HeadSample(timestamp_ms=timestamp_ms, x=x, y=y, z=z, tracked=tracked)

    async def start(self) -> None:
        """Bind the publisher socket."""
        try:
            self._sock.bind(self.host)
            logger.info(f"HeadPublisher bound to {self.endpoint}")
        except zmq.ZMQError as e:
            logger.error(f"Failed to bind HeadPublisher to {self.host}: {e}")
            raise

    async def send(self, sample: HeadSample) -> None:
        """
        Broadcasts one head sample.
        Non-blocking: ZMQ hands the message to its internal buffer.
        """
        try:
            await self._sock.send(self.encode(sample), flags=zmq.NOBLOCK)
        except zmq.Again:
            logger.debug("HeadPublisher send buffer full, sample dropped.")
        except zmq.ZMQError as e:
            # Telemetry must never stall the render loop.
            logger.error(f"ZMQ broadcast failed: {e}")

    async def close(self) -> None:
        """Shut down the ZMQ context."""
        logger.info("Closing HeadPublisher...")
        # Close immediately, don't wait for unsent messages
        self._sock.close(linger=0)
        self._ctx.term()
