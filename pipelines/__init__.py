from .runner import Pipeline, TableContext

__all__ = [
    "Pipeline",
    "TableContext",
]
