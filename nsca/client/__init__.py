"""NSCA Client Package."""

from .channel import Channel
from .client import Client
from .connection import ClientConnection, ConnectionState
from .dispatcher import Dispatcher, DispatchStats
from .pool import WorkerPool
from .redelivery import RetryBuffer, RedeliveryWorker
from .sender import ErrorKind, SendResult, send_alert

__all__ = [
    'Channel',
    'Client',
    'ClientConnection',
    'ConnectionState',
    'Dispatcher',
    'DispatchStats',
    'WorkerPool',
    'RetryBuffer',
    'RedeliveryWorker',
    'ErrorKind',
    'SendResult',
    'send_alert',
]
