"""Domain context for calls coming in from the screens.

Protean elements raise events through the active domain. Terminal threads
call the services directly, so each entry point pushes the ``pos`` context
itself, the way request middleware does for an API.
"""

import functools

from pos.domain import pos


def in_domain_context(fn):
    """Run ``fn`` with the ``pos`` domain context pushed."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        with pos.domain_context():
            return fn(*args, **kwargs)

    return wrapper
