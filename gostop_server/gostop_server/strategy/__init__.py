"""Strategy and advisory module."""

from gostop_server.strategy.advisor import Advisor
from gostop_server.strategy.base import Strategy
from gostop_server.strategy.simple import SimpleStrategy

__all__ = ["Advisor", "Strategy", "SimpleStrategy"]
