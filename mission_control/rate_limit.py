#  Mission Control - Rate Limiter
#
#  Shared limiter instance used by app.py and route decorators.
#
#  Depends on: config.py
#  Used by:    app.py, routes/seed.py

from slowapi import Limiter
from slowapi.util import get_remote_address

from mission_control.config import cfg

SEED_RATE_LIMIT = cfg("server.seed_rate_limit", "5/minute")

# Only routes decorated with @limiter.limit are limited
limiter = Limiter(key_func=get_remote_address)
