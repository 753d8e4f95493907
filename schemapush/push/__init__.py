"""Push — upload every schema in a directory and report the outcome."""

from schemapush.push.pipeline import process
from schemapush.push.reporter import Reporter

__all__ = ["process", "Reporter"]
