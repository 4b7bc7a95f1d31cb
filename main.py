from src.main.web import app

__all__ = ["app"]
