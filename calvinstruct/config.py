'''
Knobs that are not part of the format itself.

The limits harden the parser against hostile input: the format declares
its own counts and nothing prevents a corrupt file from asking for four
billion rows or an endless lineage of parent headers.
'''
import logging
import os
from typing import NamedTuple, Optional


class Limits(NamedTuple):
    max_depth: int = 64
    # the columns of a data set are allocated as soon as its row count is known,
    # the largest arrays produced by the scanners stay well below this
    max_count: Optional[int] = 1 << 24


DEFAULT_LIMITS = Limits()


def configure_logging(environ=os.environ):
    '''DEBUG in the environment turns on the debug records of every field.'''
    logging.basicConfig(level=logging.DEBUG if 'DEBUG' in environ else logging.INFO)
