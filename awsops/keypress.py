import contextlib
import atexit
import threading
import logging
import termios
import sys
import tty
import os

@contextlib.contextmanager
def cbreak(stream):
    if not stream.isatty():
        yield
        return
    fd = stream.fileno()
    old = termios.tcgetattr(fd)
    restore = lambda: termios.tcsetattr(fd, termios.TCSADRAIN, old)
    atexit.register(restore) # the reader thread is a daemon and may never reach finally
    try:
        tty.setcbreak(fd)
        yield
    finally:
        restore()
        atexit.unregister(restore)

def read_key(stream):
    with cbreak(stream):
        try:
            fd = stream.fileno()
        except (AttributeError, OSError, ValueError):
            return stream.read(1)
        return os.read(fd, 1)

def on_keypress(stream=None, stop=None):
    """
    Returns an event which is set once a single key is read from stream,
    by default the controlling terminal's stdin. Loops check the event
    between iterations, nothing is cancelled mid call.

    When stream is not a terminal, a redirected or closed stdin, no key is
    ever read and the event stays unset, so only ctrl-c stops the caller.
    """
    stream = stream or sys.stdin
    stop = stop or threading.Event()
    if not stream.isatty():
        logging.info('press <ctrl-c> to stop')
        return stop
    logging.info('press <any key> to stop')

    def wait():
        try:
            read_key(stream)
            logging.info('stopping...')
        finally:
            stop.set()

    threading.Thread(target=wait, daemon=True).start()
    return stop
