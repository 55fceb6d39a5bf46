# pagezip/pipeline/cancel.py
# ============================================================
# Cancellation token
# ============================================================
# The converter checks the token before each page. Cancelling
# from another thread (e.g. a signal handler or UI thread) is
# safe: the flag is a threading.Event.
# ============================================================

import threading


class CancelToken:
    """Cooperative cancellation flag shared between caller and converter."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
