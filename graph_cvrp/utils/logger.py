# graph_cvrp/utils/logger.py
import sys


class Logger(object):
    """Tees a stream (stdout or stderr) into a run log file."""

    def __init__(self, filename="log.txt", stream=sys.stdout):
        self.terminal = stream
        self.log = open(filename, 'a', encoding='utf-8')

    def write(self, message):
        self.terminal.write(message)
        self.log.write(message)

    def flush(self):
        self.terminal.flush()
        self.log.flush()

    def close(self):
        self.log.close()


def restore_streams():
    """Puts the original stdout/stderr back and closes their log files."""
    for name in ('stdout', 'stderr'):
        stream = getattr(sys, name)
        if isinstance(stream, Logger):
            stream.flush()
            setattr(sys, name, stream.terminal)
            stream.close()
