from .capture_fsm import CaptureFSM

__all__ = ["CaptureFSM"]
