"""Tiny trace logger.

Lines are queued by the caller and written by a daemon thread, so logging
from the frame loop never blocks on disk. Format:

    <ns-hex> <trace-hex> <span-hex> <level> [k:v;...] message
"""
import random
import threading
import time
from enum import Enum
from queue import Empty, Queue


class Level(Enum):
    INFO = 0
    WARN = 1
    ERR = 2
    DBUG = 3


class Context(threading.local):
    def __init__(self):
        super().__init__()
        self.trace_id = 0
        self.span_id = 0
        self.tags = ""
        self.sample = True

    def snapshot(self):
        return self.trace_id, self.span_id, self.tags, self.sample

    def restore(self, state):
        self.trace_id, self.span_id, self.tags, self.sample = state


ctx = Context()


def gen_id():
    return random.getrandbits(64)


def format_line(level: Level, msg: str) -> str:
    return (
        f"{time.time_ns():016x} {ctx.trace_id:016x} {ctx.span_id:016x} "
        f"{level.value} [{ctx.tags or '-'}] {msg}\n"
    )


class Logger:
    _instance = None
    _lock = threading.Lock()

    @classmethod
    def get(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = Logger()
        return cls._instance

    def __init__(self, capacity=8192):
        self.queue = Queue(maxsize=capacity)
        self.file = None
        self.path = None
        self.sample_rate = 1.0
        self.debug_enabled = True
        self._stop = threading.Event()
        self.worker = threading.Thread(target=self._drain, name="tlog", daemon=True)
        self.worker.start()

    def _drain(self):
        while not self._stop.is_set():
            try:
                line = self.queue.get(timeout=0.1)
            except Empty:
                continue
            self._write_out(line, flush=self.queue.empty())

        # Final flush of whatever was queued before close()
        while True:
            try:
                self._write_out(self.queue.get_nowait(), flush=False)
            except Empty:
                break
        if self.file:
            self.file.flush()

    def _write_out(self, line, flush):
        if self.file is None:
            return
        self.file.write(line)
        if flush:
            self.file.flush()

    def open(self, path):
        if self.file and self.path == path:
            return
        self.file = open(path, "a", encoding="utf-8")
        self.path = path

    def should_sample(self):
        return random.random() <= self.sample_rate

    def write(self, level, msg):
        if level == Level.DBUG and not self.debug_enabled:
            return
        if not ctx.sample and level != Level.ERR:
            return
        # Drop when saturated rather than stall the frame
        if not self.queue.full():
            self.queue.put(format_line(level, msg))

    def close(self):
        if self._stop.is_set():
            return
        self._stop.set()
        self.worker.join()
        if self.file:
            self.file.close()
            self.file = None


class Span:
    def __init__(self, name):
        self.name = name
        self.saved = ctx.snapshot()

    def __enter__(self):
        if ctx.trace_id == 0:
            ctx.trace_id = gen_id()
            ctx.sample = Logger.get().should_sample()
        ctx.span_id = gen_id()
        debug(f"> {self.name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            err(f"! {self.name}: {exc_type.__name__}: {exc_val}")
        debug(f"< {self.name}")
        ctx.restore(self.saved)


def _clean(value):
    return str(value).replace(" ", "_").replace(":", "_")


def tag(key, value):
    ctx.tags += f"{_clean(key)}:{_clean(value)};"


def init(path):
    Logger.get().open(path)


def info(msg):
    Logger.get().write(Level.INFO, msg)


def warn(msg):
    Logger.get().write(Level.WARN, msg)


def err(msg):
    Logger.get().write(Level.ERR, msg)


def debug(msg):
    Logger.get().write(Level.DBUG, msg)


def close():
    Logger.get().close()
