from .manager import ConnectionManager, manager

__all__ = ["ConnectionManager", "manager"]
