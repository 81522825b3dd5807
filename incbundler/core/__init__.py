from .interfaces import BundleProgress, BundlerHooks, LogProgress, NullHooks, call_hook

__all__ = ["BundleProgress", "BundlerHooks", "LogProgress", "NullHooks", "call_hook"]
