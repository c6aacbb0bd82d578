"""Default settings for apex-harness.

Maps to keys in config.example.yaml. Override via config.local.yaml.
"""

from pathlib import Path

from platformdirs import user_cache_dir, user_data_dir

# Platform-appropriate directories (resolved by platformdirs)
data_dir = Path(user_data_dir("apex-harness"))
cache_dir = Path(user_cache_dir("apex-harness"))

# Spec documents (relative to the working directory)
node_specs_path = "specs/node-specs.json"
scoring_config_path = "specs/scoring-config.json"

# Report artifacts
report_dir = str(data_dir / "reports")

# App under test
frontend_url = "http://localhost:5173"
backend_url = "http://localhost:3001"

# Browser defaults
browser_timeout_ms = 30000

# Screenshot scoring
vision_model = "gpt-4o"
vision_base_url = "https://api.openai.com/v1"
vision_threshold = 0.7
screenshot_dir = str(cache_dir / "screenshots")
