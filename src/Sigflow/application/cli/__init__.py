from .main import build_parser, run_cli

__all__ = ['build_parser', 'run_cli']
