from .service import run_if_authenticated, run_if_authorized

__all__ = ["run_if_authenticated", "run_if_authorized"]
