# sheetchat/core/rate_limit.py

from slowapi import Limiter
from slowapi.util import get_remote_address

from sheetchat.config import SEND_RATE_LIMIT

# Initialize limiter
limiter = Limiter(key_func=get_remote_address)

# Every send is one append against the spreadsheet quota
SEND_LIMIT = SEND_RATE_LIMIT
