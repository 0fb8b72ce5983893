"""Gold/silver price pipeline."""

from metalwatch.pipelines.metals.retry import DEFAULT_MAX_ATTEMPTS, obtain_quote
from metalwatch.pipelines.metals.run_metals_pipeline import MetalsPipeline, build_pipeline, run

__all__ = ["DEFAULT_MAX_ATTEMPTS", "MetalsPipeline", "build_pipeline", "obtain_quote", "run"]
