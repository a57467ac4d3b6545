from .engine import make_engine, get_sessionmaker

__all__ = ["make_engine", "get_sessionmaker"]
