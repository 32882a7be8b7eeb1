import itertools
import re
import secrets
import threading
import time

_OBJECT_ID = re.compile(r'^[0-9a-f]{24}$')

# same layout as a MongoDB ObjectId: seconds, per-process random, counter
_PROCESS = secrets.token_hex(5)
_counter = itertools.count(secrets.randbelow(0xFFFFFF))
_lock = threading.Lock()


def new_object_id() -> str:
    """24 hex chars; identifiers created by one process sort by creation time."""
    with _lock:
        count = next(_counter) & 0xFFFFFF
    return f'{int(time.time()):08x}{_PROCESS}{count:06x}'


def is_object_id(value) -> bool:
    return isinstance(value, str) and bool(_OBJECT_ID.match(value))
