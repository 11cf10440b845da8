from .zmq import HeadPublisher

__all__ = ["HeadPublisher"]
