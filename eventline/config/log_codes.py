"""
Log codes for configuration and dispatch operations.
"""

CONFIG = "config"

# Client configuration
CLIENT = f"{CONFIG}.client"
CLIENT_VALUE_RESOLVED = f"{CLIENT}.value_resolved"
CLIENT_VALUE_DEFAULTED = f"{CLIENT}.value_defaulted"
CLIENT_CONFIG_MISSING_SECTION = f"{CLIENT}.missing_section"
CLIENT_RESOLVED = f"{CLIENT}.resolved"

DISPATCH = "dispatch"

# Event queue
QUEUE = f"{DISPATCH}.queue"
QUEUE_STARTED = f"{QUEUE}.started"
QUEUE_EVENT_DROPPED = f"{QUEUE}.event_dropped"
QUEUE_FLUSH = f"{QUEUE}.flush"
QUEUE_FLUSH_FAILED = f"{QUEUE}.flush_failed"
QUEUE_CLOSING = f"{QUEUE}.closing"
QUEUE_CLOSED = f"{QUEUE}.closed"

# Responses
RESPONSE = f"{DISPATCH}.response"
RESPONSE_RECEIVED = f"{RESPONSE}.received"

# Transport
TRANSPORT = "transport"
TRANSPORT_SUBMITTED = f"{TRANSPORT}.submitted"
TRANSPORT_CLOSED = f"{TRANSPORT}.closed"
