from cityinsight.config.loader import get_default_config, load_insight_config
from cityinsight.config.logging import configure_logging
from cityinsight.config.settings import Settings
from cityinsight.config.thresholds import InsightConfig

__all__ = ["InsightConfig", "Settings", "configure_logging", "get_default_config", "load_insight_config"]
