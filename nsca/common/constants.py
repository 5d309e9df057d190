"""
NSCA Constants Module
Protocol constants and configuration values.
"""

# Protocol identification
PROTOCOL_VERSION = 3

# Handshake structure sizes
IV_SIZE = 128
TIMESTAMP_SIZE = 4

# Packet structure sizes
VERSION_FIELD_SIZE = 4
CRC_FIELD_SIZE = 4
TIMESTAMP_FIELD_SIZE = 4
SEVERITY_FIELD_SIZE = 4
HOST_FIELD_SIZE = 64
SERVICE_FIELD_SIZE = 128
MESSAGE_FIELD_SIZE = 512

# Packet field offsets
VERSION_OFFSET = 0
CRC_OFFSET = VERSION_OFFSET + VERSION_FIELD_SIZE                # 4
TIMESTAMP_OFFSET = CRC_OFFSET + CRC_FIELD_SIZE                  # 8
SEVERITY_OFFSET = TIMESTAMP_OFFSET + TIMESTAMP_FIELD_SIZE       # 12
HOST_OFFSET = SEVERITY_OFFSET + SEVERITY_FIELD_SIZE             # 16
SERVICE_OFFSET = HOST_OFFSET + HOST_FIELD_SIZE                  # 80
MESSAGE_OFFSET = SERVICE_OFFSET + SERVICE_FIELD_SIZE            # 208
PACKET_SIZE = MESSAGE_OFFSET + MESSAGE_FIELD_SIZE               # 720

# Placeholders for absent values
UNKNOWN_VALUE = "UNKNOWN"
NULL_MESSAGE = "<null>"

# Connection
DEFAULT_PORT = 5667
DEFAULT_SERVICE_NAME = "UNSPECIFIED_SERVICE"
DEFAULT_SOCKET_TIMEOUT_MS = 5000
MAX_CONNECT_ATTEMPTS = 3

# Worker pool
DEFAULT_CORE_WORKERS = 50
DEFAULT_MAX_WORKERS = 50
DEFAULT_QUEUE_CAPACITY = 2000
DEFAULT_KEEP_ALIVE = 10.0  # seconds

# Redelivery
DEFAULT_RETRY_BUFFER_SIZE = 100
DEFAULT_REDELIVERY_INTERVAL = 10.0  # seconds
DEFAULT_REDELIVERY_IDLE_PASSES = 10
