"""Client Configuration. This is unambiguously a Python sourcefile.

Copy this to client_config.py and edit to taste. Anything left out takes the
default in activity.py.
"""

import logging

REDIS_SERVER = '10.0.0.224'
REDIS_PORT = 6379
REDIS_DB = 0

# Read through RKVDNS instead of talking to Redis directly. This is the domain
# that rkvdns serves responses under.
# RKVDNS = 'redis.sophia.m3047'
RKVDNS = None
# The address of the dns server to use when querying RKVDNS.
DNS_SERVER = None

# The action when none is specified on the command line. None is "active".
ACTION = None

# Number of concurrent fetches. None lets concurrent.futures decide.
MAX_WORKERS = 7

# Determines the logging level if not None
LOG_LEVEL = logging.WARNING
# LOG_LEVEL = None
