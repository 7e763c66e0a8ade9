"""Install pipeline."""

from demongrep_installer.pipeline.executor import InstallPipeline

__all__ = ["InstallPipeline"]
