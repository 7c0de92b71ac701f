from .metrics_wrapper import MetricsWrapper

__all__ = ['MetricsWrapper']
